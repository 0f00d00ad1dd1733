"""
Tag types for schema definitions.
Used inside Annotated[type, ...] (or dataclasses.field(metadata=...)) to bind
a field to its environment variable and to give it a fallback value.
"""

from typing import Any, Iterable


class Env:
    """Name the environment variable a field reads.

    On a dict field the name is the key prefix: ``Env("PEERS")`` collects
    every ``PEERS_<key>`` variable.
    """

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"Env({self.name!r})"


class Default:
    """Value used when the field stays absent."""

    def __init__(self, value: object):
        self.value = value

    def __repr__(self) -> str:
        return f"Default({self.value!r})"


def find_tag(metadata: Iterable[Any], tag_type: type) -> Any | None:
    for m in metadata:
        if isinstance(m, tag_type):
            return m
    return None
