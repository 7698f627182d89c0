#!/usr/bin/env python3
"""
Source Values and the Value Adapter
===================================

A row read from the league database is a list of ``SourceValue`` objects.
Each one carries exactly one ``ValueKind`` and its payload. ``adapt_value``
turns a source value into a parameter the SQLite sink can bind: ``None``,
``str``, ``int`` or ``float``.

SQLite has no unsigned 64-bit integer. Unsigned values above ``2**63 - 1``
are reinterpreted as two's-complement and come out negative. This is the
archive's documented behaviour and is not corrected.

DATE and TIME values have no sink representation. None of the registered
tables selects such a column, so seeing one means a descriptor and the source
schema have drifted apart; adaptation fails with ``UnsupportedValueError``.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, List, Optional, Sequence, Union

from core.errors import UnsupportedValueError
from core.octal_decoder import decode_bytes

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1

# What sqlite3 binds natively
SinkParam = Optional[Union[str, int, float]]


class ValueKind(Enum):
    """Variants of a source value"""
    NULL = "null"
    BYTES = "bytes"
    SIGNED_INT = "signed_int"
    UNSIGNED_INT = "unsigned_int"
    FLOAT = "float"
    DATE = "date"
    TIME = "time"


@dataclass(frozen=True)
class SourceValue:
    """One column value as produced by the source, tagged with its kind."""
    kind: ValueKind
    value: Any = None

    def __post_init__(self):
        if self.kind is ValueKind.NULL and self.value is not None:
            raise ValueError("NULL source value cannot carry a payload")
        if self.kind is ValueKind.SIGNED_INT and not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"Signed value out of 64-bit range: {self.value}")
        if self.kind is ValueKind.UNSIGNED_INT and not 0 <= self.value <= UINT64_MAX:
            raise ValueError(f"Unsigned value out of 64-bit range: {self.value}")

    @classmethod
    def null(cls) -> 'SourceValue':
        return cls(ValueKind.NULL)

    @classmethod
    def from_bytes(cls, raw: bytes) -> 'SourceValue':
        return cls(ValueKind.BYTES, bytes(raw))

    @classmethod
    def signed(cls, number: int) -> 'SourceValue':
        return cls(ValueKind.SIGNED_INT, int(number))

    @classmethod
    def unsigned(cls, number: int) -> 'SourceValue':
        return cls(ValueKind.UNSIGNED_INT, int(number))

    @classmethod
    def from_float(cls, number: float) -> 'SourceValue':
        return cls(ValueKind.FLOAT, float(number))

    @classmethod
    def from_date(cls, moment: Union[date, datetime]) -> 'SourceValue':
        return cls(ValueKind.DATE, moment)

    @classmethod
    def from_time(cls, span: Union[time, timedelta]) -> 'SourceValue':
        return cls(ValueKind.TIME, span)


def to_signed64(number: int) -> int:
    """Reinterpret an unsigned 64-bit integer as signed (two's-complement)."""
    if number > INT64_MAX:
        return number - (1 << 64)
    return number


def adapt_value(value: SourceValue) -> SinkParam:
    """Convert one source value into a sink parameter."""
    kind = value.kind
    if kind is ValueKind.NULL:
        return None
    elif kind is ValueKind.BYTES:
        return decode_bytes(value.value)
    elif kind is ValueKind.SIGNED_INT:
        return value.value
    elif kind is ValueKind.UNSIGNED_INT:
        return to_signed64(value.value)
    elif kind is ValueKind.FLOAT:
        return value.value
    elif kind is ValueKind.DATE:
        raise UnsupportedValueError(
            f"DATE values are not supported: {value.value!r}",
            details={'kind': kind.value}
        )
    elif kind is ValueKind.TIME:
        raise UnsupportedValueError(
            f"TIME values are not supported: {value.value!r}",
            details={'kind': kind.value}
        )
    raise AssertionError(f"Unhandled value kind: {kind}")


def adapt_row(row: Sequence[SourceValue]) -> List[SinkParam]:
    """Adapt every value of a source row, keeping column order."""
    return [adapt_value(value) for value in row]
