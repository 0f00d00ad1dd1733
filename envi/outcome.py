"""
Absence marker shared by every converter.

A converter returns a value when the source produced one, returns ABSENT when
there was nothing usable to convert, and raises a ConfigError on failure.
"""


class _Absent:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()
