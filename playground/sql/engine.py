"""Relational engine — runs compiled SQL against DuckDB.

Typed columns come straight from the driver (VARCHAR → Text, INTEGER/DOUBLE/
DECIMAL → Number, DATE/TIMESTAMP → Timestamp, NULL → Null).
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from playground.rows import ResultSet, Row
from playground.types import QueryRequest
from playground.values import from_native

from .builder import SqlBuilder
from .sql_utils import ParameterizedQuery

if TYPE_CHECKING:
    from data.database import Database

logger = logging.getLogger(__name__)


class RelationalEngine:
    """Compile + run. One connection per call."""

    def __init__(self, builder: SqlBuilder | None = None):
        self.builder = builder or SqlBuilder()

    def compile(self, request: QueryRequest) -> ParameterizedQuery:
        return self.builder.build(request)

    def run(
        self,
        query: ParameterizedQuery,
        database: Database,
        timeout: float | None = None,
    ) -> ResultSet:
        """Execute a compiled statement and map rows into Values."""
        started = time.monotonic()
        columns, records = database.run_query(query.sql, query.params, timeout=timeout)

        # Duplicate column names (SELECT * over a join): last one wins
        rows = [
            Row((name, from_native(value)) for name, value in zip(columns, record))
            for record in records
        ]

        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(f"Relational query returned {len(rows)} rows in {duration_ms}ms")
        return ResultSet(rows)

    def execute(
        self,
        request: QueryRequest,
        database: Database,
        timeout: float | None = None,
    ) -> ResultSet:
        if request.export_sheet_name:
            logger.debug("Export is only supported by the tabular engine; ignoring")
        return self.run(self.compile(request), database, timeout=timeout)
