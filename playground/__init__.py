"""
Query Playground — one declarative query, two interchangeable stores.

Usage:
    from playground import QueryRequest, QueryService
    from data import Database, WorkbookStore

    service = QueryService(Database("data/playground.duckdb"),
                           WorkbookStore("data/playground.xlsx"))
    result = service.execute(QueryRequest(engine="tabular", table="Employees",
                                          filter="dept = Eng"))
    result.to_records()   # [{"id": "1", "name": "Ann", "dept": "Eng"}]

Public classes:
    - QueryService: Dispatcher (relational | tabular)
    - QueryRequest, JoinSpec, Engine: Request model
    - Row, ResultSet: Results
    - Null, Text, Number, Timestamp, compare: Value model
"""

from .errors import (
    QueryError,
    ConfigurationError,
    NotFound,
    SourceNotFound,
    SheetNotFound,
    UnsupportedEngine,
    JoinKeyNotFound,
    UnsafeExpression,
    SheetFormatError,
    QueryTimeout,
    ExportError,
)
from .rows import ResultSet, Row
from .service import QueryService
from .types import Engine, JoinSpec, QueryRequest
from .values import NULL, Null, Number, Text, Timestamp, Value, compare

__all__ = [
    # Service
    "QueryService",
    # Request
    "QueryRequest",
    "JoinSpec",
    "Engine",
    # Results
    "Row",
    "ResultSet",
    # Values
    "Value",
    "Null",
    "NULL",
    "Text",
    "Number",
    "Timestamp",
    "compare",
    # Errors
    "QueryError",
    "ConfigurationError",
    "NotFound",
    "SourceNotFound",
    "SheetNotFound",
    "UnsupportedEngine",
    "JoinKeyNotFound",
    "UnsafeExpression",
    "SheetFormatError",
    "QueryTimeout",
    "ExportError",
]
