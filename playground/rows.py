"""Rows and result sets.

Row keeps its column order as an explicit list next to the value mapping,
so projection and export never depend on mapping iteration order.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

import pandas as pd

from .values import Value


class Row:
    """
    Ordered mapping of unique column names to Values.

    Assigning an existing column replaces its value and keeps its position.

    Example:
        row = Row([("id", Text("1")), ("name", Text("Ann"))])
        row.columns         # ("id", "name")
        row["name"]         # Text("Ann")
    """

    __slots__ = ("_columns", "_cells")

    def __init__(self, cells: Iterable[tuple[str, Value]] = ()):
        self._columns: list[str] = []
        self._cells: dict[str, Value] = {}
        for name, value in cells:
            self.set(name, value)

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self._columns)

    def set(self, name: str, value: Value) -> None:
        if name not in self._cells:
            self._columns.append(name)
        self._cells[name] = value

    def get(self, name: str) -> Value | None:
        return self._cells.get(name)

    def items(self) -> Iterator[tuple[str, Value]]:
        for name in self._columns:
            yield name, self._cells[name]

    def values(self) -> list[Value]:
        return [self._cells[name] for name in self._columns]

    def merged_with(self, right: "Row") -> "Row":
        """Combine two rows; on shared names the right value wins."""
        merged = Row(self.items())
        for name, value in right.items():
            merged.set(name, value)
        return merged

    def project(self, allowed: Iterable[str]) -> "Row":
        """Keep only allowed columns, in this row's order."""
        allowed = set(allowed)
        return Row((name, value) for name, value in self.items() if name in allowed)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict of JSON primitives in column order."""
        return {name: value.to_primitive() for name, value in self.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._cells

    def __getitem__(self, name: str) -> Value:
        return self._cells[name]

    def __len__(self) -> int:
        return len(self._columns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return list(self.items()) == list(other.items())

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={value!r}" for name, value in self.items())
        return f"Row({inner})"


class ResultSet:
    """
    Ordered rows produced by a query.

    Attributes:
        rows: Rows in result order
        warnings: Non-fatal problems (e.g. export failures) for the caller
    """

    def __init__(self, rows: Iterable[Row] = (), warnings: list[str] | None = None):
        self.rows: list[Row] = list(rows)
        self.warnings: list[str] = list(warnings or [])

    @property
    def columns(self) -> tuple[str, ...]:
        """Columns of the first row (all rows share them after projection)."""
        if not self.rows:
            return ()
        return self.rows[0].columns

    def to_records(self) -> list[dict[str, Any]]:
        return [row.to_dict() for row in self.rows]

    def to_frame(self) -> pd.DataFrame:
        """Result as a DataFrame (columns inferred from every row)."""
        return pd.DataFrame(self.to_records())

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ResultSet(self.rows[index], self.warnings)
        return self.rows[index]

    def __bool__(self) -> bool:
        return bool(self.rows)

    def __repr__(self) -> str:
        return f"ResultSet(rows={len(self.rows)}, columns={list(self.columns)})"
