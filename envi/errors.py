"""
Errors raised while loading a schema from the environment.

Every error carries the error it wraps in ``cause`` so a failure deep inside
a nested schema can be unwound back to the offending text.
"""

INVALID_SYNTAX = "invalid syntax"
OUT_OF_RANGE = "value out of range"


class ConfigError(Exception):
    """Base class for every envi error."""

    cause: "ConfigError | None" = None

    def root_cause(self) -> "ConfigError":
        err = self
        while err.cause is not None:
            err = err.cause
        return err


class ShapeError(ConfigError, TypeError):
    """The schema, target, or a declared field type cannot be decoded."""


class ScalarParseError(ConfigError, ValueError):
    """Text does not match the grammar or range of a scalar kind."""

    def __init__(self, kind: str, text: str, reason: str):
        self.kind = kind
        self.text = text
        self.reason = reason
        super().__init__(f"parse {kind} {text!r}: {reason}")


class SequenceElementError(ConfigError):
    """A single element of a delimited value failed to convert."""

    def __init__(self, index: int, text: str, kind: str, cause: ConfigError):
        self.index = index
        self.text = text
        self.kind = kind
        self.cause = cause
        super().__init__(f"parse sequence element {index} {text!r} of kind {kind!r}: {cause}")


class MappingEntryError(ConfigError):
    """The key suffix or the value of a prefixed variable failed to convert."""

    def __init__(self, env_key: str, side: str, text: str, kind: str, cause: ConfigError):
        self.env_key = env_key
        self.side = side
        self.text = text
        self.kind = kind
        self.cause = cause
        super().__init__(f"parse map {side} {text!r} of kind {kind!r} [key={env_key}]: {cause}")


class FieldError(ConfigError):
    """A schema field failed; wraps the inner error with the field name."""

    def __init__(self, field: str, cause: ConfigError):
        self.field = field
        self.cause = cause
        super().__init__(f"parse {field!r} field: {cause}")

    @property
    def path(self) -> tuple[str, ...]:
        """Field names from the outermost schema down to the failing field."""
        names = [self.field]
        err = self.cause
        while err is not None:
            if isinstance(err, FieldError):
                names.append(err.field)
            err = err.cause
        return tuple(names)
