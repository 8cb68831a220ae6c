"""
Tabular engine — executes a QueryRequest over workbook sheets in memory.

Pipeline (fixed order):
    Load → Join* → Filter → Order → Project → Paginate → Export? → Return

All loads of one request share one read-only workbook handle, released
before the export step re-opens the file for writing.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from playground.errors import ExportError, QueryTimeout, SheetFormatError
from playground.rows import ResultSet, Row
from playground.types import QueryRequest
from playground.values import Text

from .export import export_result
from .operations import filter_rows, inner_join, order_rows, paginate, project_rows

if TYPE_CHECKING:
    from data.workbook import SheetReader, WorkbookStore

logger = logging.getLogger(__name__)


def load_sheet(reader: SheetReader, name: str) -> list[Row]:
    """
    Load a sheet as Rows of Text values.

    Raises:
        SheetNotFound: No such sheet
        SheetFormatError: Header repeats a column name
    """
    header, records = reader.read_sheet(name)

    seen = set()
    for column in header:
        if column in seen:
            raise SheetFormatError(f"Sheet '{name}' has duplicate column '{column}'")
        seen.add(column)

    return [
        Row((column, Text(cell)) for column, cell in zip(header, record))
        for record in records
    ]


class _Deadline:
    """Checks a monotonic deadline between pipeline stages."""

    def __init__(self, timeout: float | None):
        self.timeout = timeout
        self.expires = time.monotonic() + timeout if timeout else None

    def check(self, stage: str) -> None:
        if self.expires is not None and time.monotonic() > self.expires:
            raise QueryTimeout(f"Query exceeded {self.timeout}s deadline during {stage}")


class TabularEngine:
    """
    In-memory relational operators over a workbook.

    Usage:
        engine = TabularEngine()
        result = engine.execute(request, WorkbookStore("data/playground.xlsx"))

    TabularEngine keeps no state between calls.
    """

    def execute(
        self,
        request: QueryRequest,
        workbook: WorkbookStore,
        timeout: float | None = None,
    ) -> ResultSet:
        started = time.monotonic()
        deadline = _Deadline(timeout)

        with workbook.open() as reader:
            # 1. Load base sheet
            rows = load_sheet(reader, request.table)
            deadline.check("load")

            # 2. Joins, strictly left to right
            for join in request.joins:
                right = load_sheet(reader, join.table)
                rows = inner_join(rows, right, join.left_column, join.right_column)
                deadline.check(f"join {join.table}")

        # 3. Filter (only `column = value`; anything else is ignored)
        rows = filter_rows(rows, request.filter)

        # 4. Order (before projection, so hidden columns can be sort keys)
        rows = order_rows(rows, request.order_by)
        deadline.check("order")

        # 5. Projection
        if request.has_projection:
            rows = project_rows(rows, request.columns)

        # 6. Offset & limit
        rows = paginate(rows, request.offset, request.limit)

        result = ResultSet(rows)

        # 7. Export (side effect; the returned rows are unaffected)
        if result and request.export_sheet_name and request.export_sheet_name.strip():
            try:
                export_result(result, request.export_sheet_name, workbook)
            except ExportError as e:
                result.warnings.append(str(e))

        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            f"Tabular query on '{request.table}' returned {len(result)} rows "
            f"in {duration_ms}ms"
        )
        return result
