"""
Shape descriptors.
Introspects a schema dataclass once per load and turns every field's type hint
into an explicit shape the converters dispatch on.
"""

import copy
import dataclasses
import types
from dataclasses import MISSING, dataclass
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from envi.errors import ShapeError
from envi.scalars import ScalarKind, scalar_kind
from envi.tags import Default, Env, find_tag

# FieldDescriptor.default when no Default tag is given
_NO_DEFAULT = object()


@dataclass(frozen=True)
class ScalarShape:
    kind: ScalarKind

    @property
    def name(self) -> str:
        return self.kind.name

    def zero(self) -> Any:
        return self.kind.zero


@dataclass(frozen=True)
class FixedSequenceShape:
    """``tuple[A, B, C]``: one element shape per position."""

    elements: tuple[Any, ...]

    @property
    def name(self) -> str:
        return "tuple[" + ", ".join(e.name for e in self.elements) + "]"

    def zero(self) -> tuple:
        return tuple(e.zero() for e in self.elements)


@dataclass(frozen=True)
class DynamicSequenceShape:
    """``list[T]`` or ``tuple[T, ...]``."""

    element: Any
    container: type = list

    @property
    def name(self) -> str:
        if self.container is tuple:
            return f"tuple[{self.element.name}, ...]"
        return f"list[{self.element.name}]"

    def zero(self) -> Any:
        return self.container()


@dataclass(frozen=True)
class MappingShape:
    key: Any
    value: Any

    @property
    def name(self) -> str:
        return f"dict[{self.key.name}, {self.value.name}]"

    def zero(self) -> dict:
        return {}


@dataclass(frozen=True)
class OptionalShape:
    inner: Any

    @property
    def name(self) -> str:
        return f"{self.inner.name} | None"

    def zero(self) -> None:
        return None


@dataclass(frozen=True)
class FieldDescriptor:
    """One schema field: where it reads from and what it decodes to.

    ``shape`` is None for an untagged field of a type envi cannot decode;
    such a field is inert and only ever receives its default.
    """

    name: str
    shape: Any
    env: str | None = None
    default: Any = _NO_DEFAULT
    has_dataclass_default: bool = False

    @property
    def inert(self) -> bool:
        return self.shape is None

    def zero(self) -> Any:
        if self.default is not _NO_DEFAULT:
            # the tag lives on the class; every load gets its own copy
            return copy.deepcopy(self.default)
        if self.shape is None:
            return None
        return self.shape.zero()


@dataclass(frozen=True)
class CompositeShape:
    schema: type
    fields: tuple[FieldDescriptor, ...]

    @property
    def name(self) -> str:
        return self.schema.__name__

    def build(self, values: dict[str, Any]) -> Any:
        """Instantiate the schema; fields missing from ``values`` fall back."""
        kwargs: dict[str, Any] = {}
        for fd in self.fields:
            if fd.name in values:
                kwargs[fd.name] = values[fd.name]
            elif fd.default is not _NO_DEFAULT or not fd.has_dataclass_default:
                kwargs[fd.name] = fd.zero()
        return self.schema(**kwargs)

    def zero(self) -> Any:
        return self.build({})


TEXT_SHAPES = (ScalarShape, FixedSequenceShape, DynamicSequenceShape)


def is_schema(obj: Any) -> bool:
    return isinstance(obj, type) and dataclasses.is_dataclass(obj)


def unwrap_optional(shape: Any) -> tuple[Any, bool]:
    if isinstance(shape, OptionalShape):
        return shape.inner, True
    return shape, False


def _strip_annotated(hint: Any) -> tuple[Any, list[Any]]:
    if get_origin(hint) is Annotated:
        args = get_args(hint)
        return args[0], list(args[1:])
    return hint, []


def _field_metadata(hint: Any) -> list[Any]:
    """Tags from Annotated[...], including one nested in Optional[Annotated[...]]."""
    hint, metadata = _strip_annotated(hint)
    try:
        inner = _optional_inner(hint)
    except ShapeError:
        # not an optional; shape_of reports the union if the field is tagged
        return metadata
    if inner is not None:
        metadata += _strip_annotated(inner)[1]
    return metadata


def _optional_inner(hint: Any) -> Any | None:
    """Return T for Optional[T] / T | None, None for any other hint."""
    origin = get_origin(hint)
    if origin is not Union and origin is not types.UnionType:
        return None
    args = [a for a in get_args(hint) if a is not type(None)]
    if len(args) == len(get_args(hint)):
        raise ShapeError(f"unsupported union {hint!r}")
    if len(args) != 1:
        raise ShapeError(f"optional must wrap exactly one type, got {hint!r}")
    return args[0]


def _is_text_shape(shape: Any) -> bool:
    inner, _ = unwrap_optional(shape)
    return isinstance(inner, TEXT_SHAPES)


def shape_of(hint: Any, _active: tuple[type, ...] = ()) -> Any:
    """Build the shape for a type hint or raise ShapeError."""
    hint, _ = _strip_annotated(hint)

    inner = _optional_inner(hint)
    if inner is not None:
        shape = shape_of(inner, _active)
        if isinstance(shape, OptionalShape):
            return shape
        return OptionalShape(shape)

    kind = scalar_kind(hint)
    if kind is not None:
        return ScalarShape(kind)

    if is_schema(hint):
        return describe(hint, _active)

    origin = get_origin(hint)
    args = get_args(hint)

    if origin is list:
        if len(args) != 1:
            raise ShapeError(f"list must be parameterized, got {hint!r}")
        return DynamicSequenceShape(_element_shape(args[0], hint, _active), list)

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return DynamicSequenceShape(_element_shape(args[0], hint, _active), tuple)
        if not args or Ellipsis in args:
            raise ShapeError(f"unsupported tuple {hint!r}")
        return FixedSequenceShape(tuple(_element_shape(a, hint, _active) for a in args))

    if origin is dict:
        if len(args) != 2:
            raise ShapeError(f"dict must be parameterized, got {hint!r}")
        key = shape_of(args[0], _active)
        if not isinstance(unwrap_optional(key)[0], ScalarShape):
            raise ShapeError(f"dict keys must be scalar, got {hint!r}")
        value = shape_of(args[1], _active)
        if not _is_text_shape(value):
            raise ShapeError(f"dict values must be scalars or sequences, got {hint!r}")
        return MappingShape(key, value)

    raise ShapeError(f"unsupported type {hint!r}")


def _element_shape(hint: Any, container: Any, active: tuple[type, ...]) -> Any:
    shape = shape_of(hint, active)
    if not _is_text_shape(shape):
        raise ShapeError(f"sequence elements must be scalars or sequences, got {container!r}")
    return shape


def _is_structural(hint: Any) -> bool:
    """True for hints decoded without an Env tag: dataclasses and dicts."""
    hint, _ = _strip_annotated(hint)
    try:
        inner = _optional_inner(hint)
    except ShapeError:
        return False
    if inner is not None:
        hint, _ = _strip_annotated(inner)
    return is_schema(hint) or get_origin(hint) is dict


def describe(schema_class: type, _active: tuple[type, ...] = ()) -> CompositeShape:
    """Derive the ordered field table of a schema dataclass."""
    if not is_schema(schema_class):
        raise ShapeError(f"schema must be a dataclass type, got {schema_class!r}")
    if schema_class in _active:
        raise ShapeError(f"recursive schema {schema_class.__name__}")
    active = _active + (schema_class,)

    try:
        hints = get_type_hints(schema_class, include_extras=True)
    except NameError as e:
        raise ShapeError(f"cannot resolve annotations of {schema_class.__name__}: {e}") from e

    descriptors = []
    for f in dataclasses.fields(schema_class):
        if not f.init:
            continue
        hint = hints.get(f.name, f.type)
        metadata = _field_metadata(hint)
        # dataclasses.field(metadata={...}) works the same as Annotated
        metadata += list(f.metadata.values()) if f.metadata else []

        env_tag = find_tag(metadata, Env)
        default_tag = find_tag(metadata, Default)
        env = env_tag.name if env_tag is not None else None

        try:
            shape = shape_of(hint, active)
        except ShapeError as e:
            if env is not None or _is_structural(hint):
                raise ShapeError(f"{schema_class.__name__}.{f.name}: {e}") from e
            shape = None

        descriptors.append(
            FieldDescriptor(
                name=f.name,
                shape=shape,
                env=env,
                default=default_tag.value if default_tag is not None else _NO_DEFAULT,
                has_dataclass_default=f.default is not MISSING or f.default_factory is not MISSING,
            )
        )

    return CompositeShape(schema_class, tuple(descriptors))


__all__ = [
    "ScalarShape",
    "FixedSequenceShape",
    "DynamicSequenceShape",
    "MappingShape",
    "OptionalShape",
    "CompositeShape",
    "FieldDescriptor",
    "describe",
    "shape_of",
    "unwrap_optional",
    "is_schema",
]
