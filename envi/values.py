"""
Conversion of a single environment value: scalars, comma separated
sequences and optionals around either.
"""

from typing import Any

from envi.errors import ConfigError, SequenceElementError, ShapeError
from envi.outcome import ABSENT
from envi.scalars import convert_scalar
from envi.shapes import DynamicSequenceShape, FixedSequenceShape, OptionalShape, ScalarShape

SEPARATOR = ","


def split_values(text: str) -> list[str]:
    return [token.strip() for token in text.split(SEPARATOR)]


def convert_text(text: str, shape: Any) -> Any:
    """Convert one environment value to ``shape``. Returns ABSENT or raises ConfigError."""
    if isinstance(shape, ScalarShape):
        return convert_scalar(text, shape.kind)
    if isinstance(shape, OptionalShape):
        return convert_optional(text, shape)
    if isinstance(shape, (FixedSequenceShape, DynamicSequenceShape)):
        return convert_sequence(text, shape)
    raise ShapeError(f"shape {shape.name} cannot be read from a single value")


def convert_optional(text: str, shape: OptionalShape) -> Any:
    """
    An empty value leaves the optional unset (None) without consulting the
    inner shape, so Optional[bool] stays None where bool would be False.
    """
    if text == "":
        return ABSENT
    return convert_text(text, shape.inner)


def _convert_element(index: int, token: str, shape: Any) -> Any:
    try:
        value = convert_text(token, shape)
    except ConfigError as e:
        raise SequenceElementError(index, token, shape.name, e) from e
    if value is ABSENT:
        return shape.zero()
    return value


def convert_sequence(text: str, shape: FixedSequenceShape | DynamicSequenceShape) -> Any:
    if text == "":
        return ABSENT
    tokens = split_values(text)

    if isinstance(shape, FixedSequenceShape):
        # stops at capacity: surplus tokens are dropped, missing ones stay zero
        out = [element.zero() for element in shape.elements]
        for i, (token, element) in enumerate(zip(tokens, shape.elements)):
            out[i] = _convert_element(i, token, element)
        return tuple(out)

    return shape.container(_convert_element(i, token, shape.element) for i, token in enumerate(tokens))
