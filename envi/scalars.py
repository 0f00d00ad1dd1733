"""
Scalar converter: one environment value to one primitive kind.

Integers are base 10 and range checked against their width, floats accept
decimal, hexadecimal (``0x1.8p3``) and ``inf``/``nan`` literals, complex
numbers are written ``<real>+<imag>i``. Booleans never fail.
"""

import math
import re
import struct
from dataclasses import dataclass
from typing import Any, Callable

from envi import kinds
from envi.errors import INVALID_SYNTAX, OUT_OF_RANGE, ScalarParseError
from envi.outcome import ABSENT

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")

_DEC = r"(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
_HEX = r"0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+"
_DEC_FLOAT = re.compile(rf"[+-]?{_DEC}")
_HEX_FLOAT = re.compile(rf"[+-]?{_HEX}")

_COMPONENT = rf"(?:{_HEX}|{_DEC}|(?i:inf(?:inity)?|nan))"
_COMPLEX = re.compile(
    rf"(?P<real>[+-]?{_COMPONENT})(?P<imag>[+-]{_COMPONENT})i"
    rf"|(?P<single>[+-]?{_COMPONENT})(?P<unit>i)?"
)

_INFINITIES = {"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity"}

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


@dataclass(frozen=True)
class ScalarKind:
    """A primitive kind: its name, its parser and its zero value."""

    name: str
    parse: Callable[[str], Any]
    zero: Any
    # Empty text is absence for every kind but bool.
    absent_when_empty: bool = True

    def __repr__(self) -> str:
        return f"ScalarKind({self.name})"


class _Reject(Exception):
    def __init__(self, reason: str):
        self.reason = reason


def parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return text != ""


def _integer(name: str, bits: int, signed: bool) -> ScalarKind:
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        syntax = _SIGNED
    else:
        low, high = 0, (1 << bits) - 1
        syntax = _UNSIGNED

    def parse(text: str) -> int:
        if not syntax.fullmatch(text):
            raise ScalarParseError(name, text, INVALID_SYNTAX)
        n = int(text)
        if n < low or n > high:
            raise ScalarParseError(name, text, OUT_OF_RANGE)
        return n

    return ScalarKind(name, parse, 0)


def _float_value(text: str, bits: int) -> float:
    lowered = text.lower()
    if lowered in _INFINITIES or lowered == "nan":
        return float(lowered)
    if _HEX_FLOAT.fullmatch(text):
        try:
            value = float.fromhex(text)
        except OverflowError:
            raise _Reject(OUT_OF_RANGE)
    elif _DEC_FLOAT.fullmatch(text):
        value = float(text)
        if math.isinf(value):
            raise _Reject(OUT_OF_RANGE)
    else:
        raise _Reject(INVALID_SYNTAX)
    if bits == 32:
        try:
            value = struct.unpack("<f", struct.pack("<f", value))[0]
        except OverflowError:
            raise _Reject(OUT_OF_RANGE)
    return value


def _floating(name: str, bits: int) -> ScalarKind:
    def parse(text: str) -> float:
        try:
            return _float_value(text, bits)
        except _Reject as e:
            raise ScalarParseError(name, text, e.reason) from None

    return ScalarKind(name, parse, 0.0)


def _complex(name: str, bits: int) -> ScalarKind:
    component_bits = bits // 2

    def parse(text: str) -> complex:
        s = text
        if len(s) >= 2 and s[0] == "(" and s[-1] == ")":
            s = s[1:-1]
        m = _COMPLEX.fullmatch(s)
        if m is None:
            raise ScalarParseError(name, text, INVALID_SYNTAX)
        try:
            if m.group("real") is not None:
                return complex(
                    _float_value(m.group("real"), component_bits),
                    _float_value(m.group("imag"), component_bits),
                )
            value = _float_value(m.group("single"), component_bits)
        except _Reject as e:
            raise ScalarParseError(name, text, e.reason) from None
        if m.group("unit"):
            return complex(0.0, value)
        return complex(value, 0.0)

    return ScalarKind(name, parse, 0j)


STRING = ScalarKind("str", lambda text: text, "")
BOOL = ScalarKind("bool", parse_bool, False, absent_when_empty=False)

INT = _integer("int", 64, signed=True)
UINT = _integer("uint", 64, signed=False)
FLOAT64 = _floating("float64", 64)
COMPLEX128 = _complex("complex128", 128)

_KINDS: dict[Any, ScalarKind] = {
    str: STRING,
    bool: BOOL,
    int: INT,
    float: FLOAT64,
    complex: COMPLEX128,
    kinds.Int: INT,
    kinds.Int8: _integer("int8", 8, signed=True),
    kinds.Int16: _integer("int16", 16, signed=True),
    kinds.Int32: _integer("int32", 32, signed=True),
    kinds.Int64: _integer("int64", 64, signed=True),
    kinds.UInt: UINT,
    kinds.UInt8: _integer("uint8", 8, signed=False),
    kinds.UInt16: _integer("uint16", 16, signed=False),
    kinds.UInt32: _integer("uint32", 32, signed=False),
    kinds.UInt64: _integer("uint64", 64, signed=False),
    kinds.Float32: _floating("float32", 32),
    kinds.Float64: FLOAT64,
    kinds.Complex64: _complex("complex64", 64),
    kinds.Complex128: COMPLEX128,
}


def scalar_kind(hint: Any) -> ScalarKind | None:
    """Return the kind for a type hint, or None if it is not a scalar."""
    try:
        return _KINDS.get(hint)
    except TypeError:
        # unhashable hint
        return None


def convert_scalar(text: str, kind: ScalarKind) -> Any:
    """Convert text to ``kind``; empty text is ABSENT unless the kind is bool."""
    if text == "" and kind.absent_when_empty:
        return ABSENT
    return kind.parse(text)
