"""Value model — tagged cell values and their total order.

A cell is exactly one of:
- Null: missing value
- Text: string (everything read from a sheet starts as Text)
- Number: float
- Timestamp: naive datetime (aware values are normalised to UTC)

Sheets are untyped, so numeric/temporal meaning is derived lazily with
parse_sort_key() when ordering. compare() is the single ordering rule used
by every engine.

Example:
    compare(NULL, Text("x"))           # -1
    compare(Number(2), Number(10))     # -1
    compare(Number(2), Text("10"))     # 1  ("2" > "10" as text)
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Union

from constants import TIMESTAMP_FORMATS


# =============================================================================
# Variants
# =============================================================================

@dataclass(frozen=True)
class Null:
    """Missing value. Sorts before everything else."""

    def as_text(self) -> str:
        return ""

    def to_primitive(self) -> None:
        return None


@dataclass(frozen=True)
class Text:
    value: str

    def as_text(self) -> str:
        return self.value

    def to_primitive(self) -> str:
        return self.value


@dataclass(frozen=True)
class Number:
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))

    def as_text(self) -> str:
        return format_number(self.value)

    def to_primitive(self) -> int | float:
        if self.value.is_integer():
            return int(self.value)
        return self.value


@dataclass(frozen=True)
class Timestamp:
    value: datetime

    def as_text(self) -> str:
        return self.value.isoformat(sep=" ")

    def to_primitive(self) -> str:
        return self.value.isoformat()


Value = Union[Null, Text, Number, Timestamp]

NULL = Null()


def format_number(value: float) -> str:
    """Textual form of a number: integral floats print without '.0'."""
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


# =============================================================================
# Conversion
# =============================================================================

def from_native(obj: Any) -> Value:
    """
    Map a driver/native Python value to a Value.

    Args:
        obj: Value as returned by DuckDB or openpyxl

    Returns:
        Concrete Value variant (unknown types fall back to Text)
    """
    if obj is None:
        return NULL
    if isinstance(obj, str):
        return Text(obj)
    # bool is an int subclass, check it first
    if isinstance(obj, bool):
        return Number(1.0 if obj else 0.0)
    if isinstance(obj, (int, float, Decimal)):
        number = float(obj)
        if not math.isfinite(number):
            return NULL
        return Number(number)
    if isinstance(obj, datetime):
        return Timestamp(_naive(obj))
    if isinstance(obj, date):
        return Timestamp(datetime.combine(obj, time()))
    return Text(str(obj))


def _naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# Plain decimal number: 42, -1.5, .5, 1e3 (no underscores, no inf/nan)
NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# Number with thousands separators: 1,000 / 12,345.67
GROUPED_NUMBER_PATTERN = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d+)?$")


def parse_number(text: str) -> float | None:
    """Parse decimal text into a finite float, or None."""
    candidate = text.strip()
    if GROUPED_NUMBER_PATTERN.match(candidate):
        candidate = candidate.replace(",", "")
    if not NUMBER_PATTERN.match(candidate):
        return None
    number = float(candidate)
    if not math.isfinite(number):
        return None
    return number


def parse_timestamp(text: str) -> datetime | None:
    """Parse ISO-8601 or a known layout into a naive datetime, or None."""
    candidate = text.strip()
    # Bare numbers are never dates ("20240101" is valid basic ISO format)
    if not candidate or NUMBER_PATTERN.match(candidate):
        return None
    try:
        return _naive(datetime.fromisoformat(candidate))
    except ValueError:
        pass
    for layout in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(candidate, layout)
        except ValueError:
            continue
    return None


def parse_sort_key(value: Value | None) -> Value:
    """
    Derive the sort key of a cell.

    Priority: timestamp, number, raw text. Missing cells and Null sort as NULL.
    Already-typed values are returned unchanged.
    """
    if value is None:
        return NULL
    if not isinstance(value, Text):
        return value
    stamp = parse_timestamp(value.value)
    if stamp is not None:
        return Timestamp(stamp)
    number = parse_number(value.value)
    if number is not None:
        return Number(number)
    return value


# =============================================================================
# Ordering
# =============================================================================

def _sign(diff: int | float) -> int:
    return (diff > 0) - (diff < 0)


def _compare_text(a: str, b: str) -> int:
    a, b = a.casefold(), b.casefold()
    return (a > b) - (a < b)


def compare(a: Value, b: Value) -> int:
    """
    Total order over Values.

    Rules, in order:
        1. both Null → 0; Null is less than any non-null
        2. same variant → native order (Text case-insensitive)
        3. different variants → case-insensitive text comparison

    Returns:
        -1, 0 or 1
    """
    a_null = isinstance(a, Null)
    b_null = isinstance(b, Null)
    if a_null or b_null:
        return b_null - a_null

    if isinstance(a, Text) and isinstance(b, Text):
        return _compare_text(a.value, b.value)
    if isinstance(a, Number) and isinstance(b, Number):
        return _sign(a.value - b.value)
    if isinstance(a, Timestamp) and isinstance(b, Timestamp):
        return (a.value > b.value) - (a.value < b.value)

    return _compare_text(a.as_text(), b.as_text())


def text_equals(value: Value, literal: str) -> bool:
    """Case-insensitive equality of a non-null value's text with a literal."""
    if isinstance(value, Null):
        return False
    return compare(Text(value.as_text()), Text(literal)) == 0
