"""
Reflection-based config loader.
Introspects a schema dataclass, walks its fields (recursing into nested
dataclasses), converts the matching environment values and builds the result.
"""

import dataclasses
import logging
from typing import Any, Mapping, TypeVar

from envi.errors import ConfigError, FieldError, ShapeError
from envi.mappings import convert_mapping
from envi.outcome import ABSENT
from envi.shapes import CompositeShape, FieldDescriptor, MappingShape, describe, is_schema, unwrap_optional
from envi.snapshot import environ_snapshot, mapping_snapshot
from envi.values import convert_text

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _convert_field(snapshot: Mapping[str, str], fd: FieldDescriptor) -> Any:
    if fd.inert:
        return ABSENT

    shape, _ = unwrap_optional(fd.shape)

    # nested dataclasses and dicts are found structurally, not through Env
    if isinstance(shape, CompositeShape):
        return convert_composite(snapshot, shape)
    if isinstance(shape, MappingShape):
        return convert_mapping(snapshot, fd.env, shape)

    if fd.env is None:
        logger.debug("field %s has no Env tag; skipped", fd.name)
        return ABSENT

    text = snapshot.get(fd.env, "")
    if text == "":
        # unset and empty are the same: the field keeps its default (False for bool)
        return ABSENT
    return convert_text(text, fd.shape)


def convert_composite(snapshot: Mapping[str, str], shape: CompositeShape) -> Any:
    """
    Convert every field of ``shape`` in declaration order.

    Returns the built instance if at least one field was present, ABSENT
    otherwise. Absent fields get their Default, dataclass default or zero.
    Raises FieldError naming the first field that failed.
    """
    values: dict[str, Any] = {}
    for fd in shape.fields:
        try:
            value = _convert_field(snapshot, fd)
        except ConfigError as e:
            raise FieldError(fd.name, e) from e
        if value is not ABSENT:
            values[fd.name] = value

    if not values:
        return ABSENT
    return shape.build(values)


def load_config(schema_class: type[T], env: Mapping[str, str] | None = None) -> T:
    """
    Build a fresh ``schema_class`` from one snapshot of the environment.

    Nested dataclasses and dict fields are discovered from the type hints;
    every other field needs an Env tag. ``env`` replaces os.environ as the
    snapshot source. If nothing in the snapshot matched, the result holds
    only defaults and zeros.

    Raises ShapeError when a hint cannot be decoded and FieldError, carrying
    the path of field names, on the first value that fails to convert.
    """
    if not is_schema(schema_class):
        raise ShapeError(f"schema must be a dataclass type, got {schema_class!r}")

    snapshot = environ_snapshot() if env is None else mapping_snapshot(env)
    shape = describe(schema_class)
    logger.debug("loading %s (%d fields) from %d variables", shape.name, len(shape.fields), len(snapshot))

    result = convert_composite(snapshot, shape)
    if result is ABSENT:
        logger.debug("no variables found for %s; using defaults", shape.name)
        return shape.zero()
    return result


def parse_into(target: Any, env: Mapping[str, str] | None = None) -> None:
    """
    Populate an existing dataclass instance in place.
    Every field is replaced, and only once the whole load has succeeded.
    """
    if target is None:
        raise ShapeError("target must not be None")
    if isinstance(target, type) or not dataclasses.is_dataclass(target):
        raise ShapeError(f"target must be a dataclass instance, got {type(target).__name__}")
    if type(target).__dataclass_params__.frozen:
        raise ShapeError(f"cannot parse into frozen dataclass {type(target).__name__}")

    loaded = load_config(type(target), env)
    for f in dataclasses.fields(loaded):
        setattr(target, f.name, getattr(loaded, f.name))


def must_load_config(schema_class: type[T], env: Mapping[str, str] | None = None) -> T:
    """load_config, but a config error terminates the process."""
    try:
        return load_config(schema_class, env)
    except ConfigError as e:
        logger.critical("invalid configuration for %s: %s", getattr(schema_class, "__name__", schema_class), e)
        raise SystemExit(f"invalid configuration: {e}") from e


def must_parse_into(target: Any, env: Mapping[str, str] | None = None) -> None:
    """parse_into, but a config error terminates the process."""
    try:
        parse_into(target, env)
    except ConfigError as e:
        logger.critical("invalid configuration for %s: %s", type(target).__name__, e)
        raise SystemExit(f"invalid configuration: {e}") from e
