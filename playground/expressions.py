"""Tokenizer and AST for the two supported expression shapes.

    filter:   <column> = <literal>        ("dept = Eng", "name = 'Ann'")
    order_by: <column> [ASC|DESC]         ("id DESC", "hired")

Parsing never raises. Text that does not fit a shape yields None and the
caller decides: the tabular engine ignores it, the SQL builder rejects it in
safe mode.
"""

from __future__ import annotations

from dataclasses import dataclass

QUOTE_CHARS = "'\""


@dataclass(frozen=True)
class EqualsPredicate:
    """column = literal (literal already stripped of surrounding quotes)."""

    column: str
    literal: str


@dataclass(frozen=True)
class OrderSpec:
    """Single sort column with direction."""

    column: str
    descending: bool = False

    @property
    def direction(self) -> str:
        return "DESC" if self.descending else "ASC"


def tokenize_filter(text: str) -> list[str]:
    """Split filter text at the first '=' into trimmed parts."""
    return [part.strip() for part in text.split("=", 1)]


def parse_filter(text: str | None) -> EqualsPredicate | None:
    """
    Parse `column = literal`.

    Everything right of the first '=' is the literal, so "a = b = c" compares
    column "a" with "b = c". Quotes around the literal are stripped.
    """
    if text is None or not text.strip():
        return None
    parts = tokenize_filter(text)
    if len(parts) != 2:
        return None
    column, literal = parts
    return EqualsPredicate(column=column, literal=literal.strip(QUOTE_CHARS))


def parse_order(text: str | None) -> OrderSpec | None:
    """Parse `column [ASC|DESC]`; any second token other than DESC is ascending."""
    if text is None or not text.strip():
        return None
    tokens = text.split()
    descending = len(tokens) > 1 and tokens[1].upper() == "DESC"
    return OrderSpec(column=tokens[0], descending=descending)


def is_strict_order(text: str) -> bool:
    """True when order text is exactly `column` or `column ASC|DESC`."""
    tokens = text.split()
    if len(tokens) == 1:
        return True
    return len(tokens) == 2 and tokens[1].upper() in ("ASC", "DESC")
