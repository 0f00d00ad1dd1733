"""envi: decode environment variables into typed, nested dataclass configs."""

import logging

from envi.base import load_config, must_load_config, must_parse_into, parse_into
from envi.errors import (
    ConfigError,
    FieldError,
    MappingEntryError,
    ScalarParseError,
    SequenceElementError,
    ShapeError,
)
from envi.kinds import (
    Complex64,
    Complex128,
    Float32,
    Float64,
    Int,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from envi.shapes import describe
from envi.snapshot import dotenv_snapshot, environ_snapshot, mapping_snapshot
from envi.tags import Default, Env

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "load_config",
    "parse_into",
    "must_load_config",
    "must_parse_into",
    "describe",
    "environ_snapshot",
    "mapping_snapshot",
    "dotenv_snapshot",
    "Env",
    "Default",
    "ConfigError",
    "ShapeError",
    "ScalarParseError",
    "SequenceElementError",
    "MappingEntryError",
    "FieldError",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
    "Complex64",
    "Complex128",
]
