"""Conversion of fetched column values into SQL literal text."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Optional

ColumnTransform = Callable[[str], str]

NULL_LITERAL = "null"

# Bytes that are not UTF-8 survive as lone surrogates and are restored by
# writing with the same error handler.
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class NullableValue:
    """One fetched cell: either SQL ``NULL`` or its textual form."""

    is_null: bool
    raw: str = ""

    @classmethod
    def null(cls) -> "NullableValue":
        return cls(is_null=True)

    @classmethod
    def of(cls, raw: str) -> "NullableValue":
        return cls(is_null=False, raw=raw)


def _format_timedelta(value: timedelta) -> str:
    # MySQL TIME columns arrive as timedelta and may exceed 24 hours. Negative
    # values are stored as negative days plus positive seconds, so the fields
    # come from the magnitude.
    negative = value < timedelta(0)
    magnitude = -value if negative else value
    hours, remainder = divmod(magnitude.days * 86400 + magnitude.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    text = f"{'-' if negative else ''}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if magnitude.microseconds:
        text += f".{magnitude.microseconds:06d}"
    return text


def _as_text(value: Any) -> str:
    if isinstance(value, memoryview):
        value = value.tobytes()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode(TEXT_ENCODING, TEXT_ERRORS)
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return _format_timedelta(value)
    return str(value)


def to_nullable(value: Any) -> NullableValue:
    """Convert a driver value into a :class:`NullableValue`.

    Binary payloads are decoded as UTF-8. Invalid sequences are kept as
    escaped surrogates, so writing the text back with :data:`TEXT_ERRORS`
    reproduces the original bytes.
    """

    if value is None:
        return NullableValue.null()
    return NullableValue.of(_as_text(value))


def escape_literal(text: str) -> str:
    """Backslash-escape ``\\`` and ``'`` the way MySQL string literals expect."""

    return text.replace("\\", "\\\\").replace("'", "\\'")


def encode_value(
    column: str,
    value: NullableValue,
    transform: Optional[ColumnTransform] = None,
    *,
    escape: bool = False,
) -> str:
    """Return the literal text for ``value``.

    ``NULL`` renders as the bare ``null`` keyword and is never transformed.
    Other values pass through ``transform`` (when given) and are wrapped in
    single quotes. Embedded quotes are left untouched unless ``escape`` is
    set, so a value containing ``'`` yields an unreadable statement in the
    default mode.
    """

    if value.is_null:
        return NULL_LITERAL
    text = value.raw
    if transform is not None:
        text = transform(text)
    if escape:
        text = escape_literal(text)
    return f"'{text}'"


__all__ = [
    "ColumnTransform",
    "NULL_LITERAL",
    "NullableValue",
    "TEXT_ENCODING",
    "TEXT_ERRORS",
    "encode_value",
    "escape_literal",
    "to_nullable",
]
