"""Field kinds and numeric width markers.

Leaf fields are classified into five kinds; nested dataclasses are the
sixth, walked recursively rather than bound. Python has a single ``int``
and ``float``, so exact widths are declared with ``Annotated`` aliases::

    @dataclass
    class ServerConfig:
        port: UInt16 = env("name=PORT,default=8080")
        ratio: Float32 = env("name=RATIO")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated


class FieldKind(StrEnum):
    """Binding kind of a record field."""

    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    STR = "str"
    BOOL = "bool"
    RECORD = "record"

    @property
    def is_numeric(self) -> bool:
        return self in NUMERIC_KINDS


NUMERIC_KINDS: frozenset[FieldKind] = frozenset({FieldKind.INT, FieldKind.UINT, FieldKind.FLOAT})

INT_WIDTHS: frozenset[int] = frozenset({8, 16, 32, 64})
FLOAT_WIDTHS: frozenset[int] = frozenset({32, 64})

DEFAULT_INT_BITS = 64
DEFAULT_FLOAT_BITS = 64

# Decimal and exponent forms plus inf/infinity/nan; no whitespace or underscores.
FLOAT_LITERAL_RE = re.compile(
    r"^[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Width:
    """Storage width for an ``int`` or ``float`` field."""

    bits: int
    signed: bool = True


Int8 = Annotated[int, Width(8)]
Int16 = Annotated[int, Width(16)]
Int32 = Annotated[int, Width(32)]
Int64 = Annotated[int, Width(64)]

UInt = Annotated[int, Width(64, signed=False)]
UInt8 = Annotated[int, Width(8, signed=False)]
UInt16 = Annotated[int, Width(16, signed=False)]
UInt32 = Annotated[int, Width(32, signed=False)]
UInt64 = Annotated[int, Width(64, signed=False)]

Float32 = Annotated[float, Width(32)]
Float64 = Annotated[float, Width(64)]


def is_float_literal(text: str) -> bool:
    """Whether *text* is a floating-point literal, for values and ``min``/``max``."""
    return FLOAT_LITERAL_RE.match(text) is not None


def int_range(bits: int, *, signed: bool) -> tuple[int, int]:
    """Return the inclusive ``(lowest, highest)`` values for an integer width."""
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def type_label(kind: FieldKind, bits: int | None) -> str:
    """Human-readable type name, e.g. ``int16``, ``uint``, ``float32``, ``bool``."""
    if kind is FieldKind.UINT and bits == DEFAULT_INT_BITS:
        return "uint"
    if kind is FieldKind.INT and bits == DEFAULT_INT_BITS:
        return "int"
    if kind is FieldKind.FLOAT and bits == DEFAULT_FLOAT_BITS:
        return "float"
    if bits is not None:
        return f"{kind.value}{bits}"
    return kind.value
