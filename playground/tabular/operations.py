"""Operations — relational operators over in-memory rows.

Each operation takes a list of Rows and returns a new list; inputs are not
mutated. Operations know nothing about workbooks.

Pipeline order (fixed, see engine.py):
    join* → filter → order → project → paginate
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable, Sequence

from playground.errors import JoinKeyNotFound
from playground.expressions import parse_filter, parse_order
from playground.rows import Row
from playground.values import Null, Value, compare, parse_sort_key, text_equals


def inner_join(
    left: Sequence[Row],
    right: Sequence[Row],
    left_column: str,
    right_column: str,
) -> list[Row]:
    """
    Inner equality join; right values win on shared column names.

    Keys match by exact Value equality (Null never matches). Output follows
    left order, then right order among matches. An empty left side returns
    [] without checking keys.

    Raises:
        JoinKeyNotFound: A right row lacks right_column or a left row lacks
            left_column
    """
    if not left:
        return []

    index: dict[Value, list[Row]] = {}
    for row in right:
        if right_column not in row:
            raise JoinKeyNotFound(f"Join column '{right_column}' not found in right rows")
        key = row[right_column]
        if isinstance(key, Null):
            continue
        index.setdefault(key, []).append(row)

    joined = []
    for row in left:
        if left_column not in row:
            raise JoinKeyNotFound(f"Join column '{left_column}' not found in left rows")
        for match in index.get(row[left_column], ()):
            joined.append(row.merged_with(match))
    return joined


def filter_rows(rows: Sequence[Row], text: str | None) -> list[Row]:
    """
    Keep rows where `column = literal` holds (case-insensitive text match).

    Text without '=' is ignored and rows pass through unchanged. Rows missing
    the column, or holding Null, are dropped.
    """
    predicate = parse_filter(text)
    if predicate is None:
        return list(rows)

    return [
        row for row in rows
        if predicate.column in row and text_equals(row[predicate.column], predicate.literal)
    ]


def order_rows(rows: Sequence[Row], text: str | None) -> list[Row]:
    """
    Stable sort by one column (`column [DESC]`).

    Keys: timestamp parse, else number, else text; absent cells sort as Null.
    """
    order = parse_order(text)
    if order is None:
        return list(rows)

    keyed = [(parse_sort_key(row.get(order.column)), row) for row in rows]
    keyed.sort(key=cmp_to_key(lambda a, b: compare(a[0], b[0])), reverse=order.descending)
    return [row for _, row in keyed]


def project_rows(rows: Sequence[Row], columns: Iterable[str] | None) -> list[Row]:
    """Keep listed columns in each row's own order; missing ones are omitted."""
    columns = list(columns or [])
    if not columns:
        return list(rows)
    return [row.project(columns) for row in rows]


def paginate(rows: Sequence[Row], offset: int | None, limit: int | None) -> list[Row]:
    """Skip `offset` rows, then keep at most `limit`."""
    result = list(rows)
    if offset is not None:
        result = result[offset:]
    if limit is not None:
        result = result[:limit]
    return result
