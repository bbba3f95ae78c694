from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest

from maskdump.codec import (
    TEXT_ENCODING,
    TEXT_ERRORS,
    NullableValue,
    encode_value,
    escape_literal,
    to_nullable,
)


def test_null_renders_bare_keyword_and_skips_transform() -> None:
    calls: list[str] = []

    def transform(value: str) -> str:
        calls.append(value)
        return "changed"

    assert encode_value("email", NullableValue.null(), transform) == "null"
    assert calls == []


def test_non_null_value_is_quoted() -> None:
    assert encode_value("name", NullableValue.of("alice")) == "'alice'"
    assert encode_value("name", NullableValue.of("")) == "''"


def test_transform_applies_before_quoting() -> None:
    result = encode_value("email", NullableValue.of("a@x.com"), str.upper)

    assert result == "'A@X.COM'"


def test_quotes_are_left_unescaped_by_default() -> None:
    assert encode_value("note", NullableValue.of("it's")) == "'it's'"


def test_escape_mode_escapes_quotes_and_backslashes() -> None:
    value = NullableValue.of("it's a \\ path")

    assert encode_value("note", value, escape=True) == "'it\\'s a \\\\ path'"
    assert escape_literal("plain") == "plain"


def test_escape_runs_after_transform() -> None:
    value = NullableValue.of("x")

    assert encode_value("note", value, lambda _v: "o'k", escape=True) == "'o\\'k'"


def test_encoding_is_repeatable() -> None:
    value = NullableValue.of("bob")

    first = encode_value("name", value, str.title)
    second = encode_value("name", value, str.title)

    assert first == second == "'Bob'"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (1, "1"),
        (2.5, "2.5"),
        (Decimal("10.50"), "10.50"),
        (True, "1"),
        (False, "0"),
        (b"bytes", "bytes"),
        (bytearray(b"array"), "array"),
        (memoryview(b"view"), "view"),
        (datetime(2024, 1, 2, 3, 4, 5), "2024-01-02 03:04:05"),
        (date(2024, 1, 2), "2024-01-02"),
        (time(3, 4, 5), "03:04:05"),
        (timedelta(hours=26, minutes=3, seconds=4), "26:03:04"),
        (-timedelta(hours=1, minutes=2, seconds=3), "-01:02:03"),
        (-timedelta(hours=1, microseconds=250000), "-01:00:00.250000"),
        (-timedelta(microseconds=500000), "-00:00:00.500000"),
        (timedelta(seconds=1, microseconds=5), "00:00:01.000005"),
        ("text", "text"),
    ],
)
def test_to_nullable_converts_driver_values(raw: object, expected: str) -> None:
    value = to_nullable(raw)

    assert value == NullableValue(is_null=False, raw=expected)


def test_to_nullable_maps_none_to_null() -> None:
    assert to_nullable(None).is_null


def test_to_nullable_keeps_invalid_utf8_bytes() -> None:
    value = to_nullable(b"ok\xff\xfe")

    assert value.raw.encode(TEXT_ENCODING, TEXT_ERRORS) == b"ok\xff\xfe"
    assert encode_value("payload", value) == "'ok\udcff\udcfe'"
