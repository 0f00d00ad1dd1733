"""
Fixed-width scalar kinds.

Python's ``int``, ``float`` and ``complex`` do not carry a width, so schemas
that need range checking annotate fields with these markers instead::

    retries: Annotated[UInt8, Env("RETRIES")]

At runtime the values are plain ``int``/``float``/``complex``.
"""

from typing import NewType

Int = NewType("Int", int)
Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)

UInt = NewType("UInt", int)
UInt8 = NewType("UInt8", int)
UInt16 = NewType("UInt16", int)
UInt32 = NewType("UInt32", int)
UInt64 = NewType("UInt64", int)

Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)

Complex64 = NewType("Complex64", complex)
Complex128 = NewType("Complex128", complex)
