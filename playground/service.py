"""
Query service — routes a QueryRequest to the engine it names.

    QueryRequest → QueryService.execute() → RelationalEngine | TabularEngine → ResultSet

No logic beyond routing: the engine name is matched case-insensitively and
anything other than relational/tabular raises UnsupportedEngine.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .rows import ResultSet
from .sql.engine import RelationalEngine
from .tabular.engine import TabularEngine
from .types import Engine, QueryRequest

if TYPE_CHECKING:
    from data.database import Database
    from data.workbook import WorkbookStore

logger = logging.getLogger(__name__)


class QueryService:
    """
    Entry point for query execution.

    Args:
        database: Relational store handle
        workbook: Tabular store handle
        relational: Engine override (tests, raw-SQL mode)
        tabular: Engine override
    """

    def __init__(
        self,
        database: Database,
        workbook: WorkbookStore,
        relational: RelationalEngine | None = None,
        tabular: TabularEngine | None = None,
    ):
        self.database = database
        self.workbook = workbook
        self.relational = relational or RelationalEngine()
        self.tabular = tabular or TabularEngine()

    def execute(self, request: QueryRequest, timeout: float | None = None) -> ResultSet:
        """
        Execute the request on its engine.

        Raises:
            UnsupportedEngine: request.engine is not relational/tabular
        """
        engine = Engine.from_name(request.engine)
        logger.info(f"Executing {engine.value} query on '{request.table}'")

        if engine is Engine.RELATIONAL:
            return self.relational.execute(request, self.database, timeout=timeout)
        return self.tabular.execute(request, self.workbook, timeout=timeout)
