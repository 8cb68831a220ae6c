"""
Unit tests for the value model.

Run: pytest playground/tests/test_values.py -v
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from playground.values import (
    NULL,
    Number,
    Text,
    Timestamp,
    compare,
    from_native,
    parse_number,
    parse_sort_key,
    parse_timestamp,
    text_equals,
)


SAMPLES = [
    NULL,
    Text("x"),
    Text("X"),
    Text("10"),
    Number(2.0),
    Number(10.0),
    Timestamp(datetime(2024, 1, 5)),
    Timestamp(datetime(2023, 12, 31, 23, 59)),
]


class TestCompare:
    """Total order over values."""

    def test_null_is_less_than_text(self):
        assert compare(NULL, Text("x")) == -1
        assert compare(Text("x"), NULL) == 1

    def test_both_null_equal(self):
        assert compare(NULL, NULL) == 0

    @pytest.mark.parametrize("a", SAMPLES)
    @pytest.mark.parametrize("b", SAMPLES)
    def test_symmetry(self, a, b):
        assert compare(a, b) == -compare(b, a)

    def test_text_is_case_insensitive(self):
        assert compare(Text("abc"), Text("ABC")) == 0
        assert compare(Text("apple"), Text("Banana")) == -1

    def test_numbers_compare_numerically(self):
        assert compare(Number(2), Number(10)) == -1
        assert compare(Number(-1.5), Number(-1.5)) == 0

    def test_timestamps_compare_chronologically(self):
        assert compare(
            Timestamp(datetime(2023, 12, 31)),
            Timestamp(datetime(2024, 1, 1)),
        ) == -1

    def test_mixed_variants_compare_as_text(self):
        # "2" > "10" as text
        assert compare(Number(2), Text("10")) == 1
        assert compare(Number(5), Text("5")) == 0
        assert compare(Timestamp(datetime(2024, 1, 5)), Text("2024-01-05 00:00:00")) == 0


class TestParsing:
    """Lazy interpretation of text cells."""

    def test_sort_key_prefers_timestamp(self):
        assert parse_sort_key(Text("2024-01-05")) == Timestamp(datetime(2024, 1, 5))
        assert parse_sort_key(Text("01/31/2024")) == Timestamp(datetime(2024, 1, 31))

    def test_sort_key_number(self):
        assert parse_sort_key(Text("42")) == Number(42.0)
        assert parse_sort_key(Text(" -3.5 ")) == Number(-3.5)
        assert parse_sort_key(Text("1,250.75")) == Number(1250.75)

    def test_bare_number_is_not_a_date(self):
        assert parse_timestamp("20240101") is None
        assert parse_sort_key(Text("20240101")) == Number(20240101.0)

    def test_sort_key_falls_back_to_text(self):
        assert parse_sort_key(Text("Ann")) == Text("Ann")
        assert parse_sort_key(Text("")) == Text("")

    def test_sort_key_rejects_non_finite(self):
        assert parse_number("nan") is None
        assert parse_number("inf") is None
        assert parse_sort_key(Text("NaN")) == Text("NaN")

    def test_sort_key_missing_is_null(self):
        assert parse_sort_key(None) is NULL
        assert parse_sort_key(NULL) is NULL

    def test_aware_timestamp_normalised_to_utc(self):
        parsed = parse_timestamp("2024-01-05T10:00:00+02:00")
        assert parsed == datetime(2024, 1, 5, 8, 0)
        assert parsed.tzinfo is None


class TestNative:
    """Driver values → Value."""

    def test_from_native(self):
        assert from_native(None) is NULL
        assert from_native("a") == Text("a")
        assert from_native(3) == Number(3.0)
        assert from_native(Decimal("1.25")) == Number(1.25)
        assert from_native(True) == Number(1.0)
        assert from_native(float("inf")) is NULL
        assert from_native(float("-inf")) is NULL
        assert from_native(float("nan")) is NULL
        assert from_native(date(2024, 1, 5)) == Timestamp(datetime(2024, 1, 5))
        assert from_native(datetime(2024, 1, 5, 12, tzinfo=timezone.utc)) == Timestamp(
            datetime(2024, 1, 5, 12)
        )

    def test_text_forms(self):
        assert Number(2.0).as_text() == "2"
        assert Number(2.5).as_text() == "2.5"
        assert NULL.as_text() == ""
        assert Timestamp(datetime(2024, 1, 5)).as_text() == "2024-01-05 00:00:00"

    def test_primitives(self):
        assert Number(2.0).to_primitive() == 2
        assert isinstance(Number(2.0).to_primitive(), int)
        assert Number(2.5).to_primitive() == 2.5
        assert NULL.to_primitive() is None
        assert Timestamp(datetime(2024, 1, 5)).to_primitive() == "2024-01-05T00:00:00"

    def test_text_equals(self):
        assert text_equals(Text("Eng"), "eng")
        assert text_equals(Number(1.0), "1")
        assert not text_equals(NULL, "")
