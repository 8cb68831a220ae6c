"""
Pydantic models for the query request.

QueryRequest is the engine-agnostic description of a result:
table → joins → filter → order → columns → offset/limit → export.

JSON field names are camelCase (leftColumn, orderBy, exportSheetName);
Python attribute names are snake_case. Requests are immutable.

Example:
    request = QueryRequest.model_validate({
        "engine": "tabular",
        "table": "Employees",
        "joins": [{"table": "Depts", "leftColumn": "dept", "rightColumn": "code"}],
        "filter": "dept = Eng",
        "orderBy": "id DESC",
        "limit": 10,
    })
"""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .errors import UnsupportedEngine


class Engine(Enum):
    """Backing store a request runs against."""

    RELATIONAL = "relational"
    """DuckDB database — request compiled to SQL."""

    TABULAR = "tabular"
    """Excel workbook — operators evaluated in memory."""

    @classmethod
    def from_name(cls, name: str) -> "Engine":
        """Resolve an engine name case-insensitively."""
        normalized = (name or "").strip().lower()
        for engine in cls:
            if engine.value == normalized:
                return engine
        raise UnsupportedEngine(f"Engine {name} is not supported.")


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class JoinSpec(_RequestModel):
    """One inner equality join: <accumulated>.left_column = <table>.right_column."""

    table: str
    left_column: str
    right_column: str


class QueryRequest(_RequestModel):
    """Declarative query, executed by exactly one engine."""

    engine: str = Field(description="relational | tabular (case-insensitive)")
    table: str = Field(description="Base table or sheet name")
    columns: tuple[str, ...] | None = Field(default=None, description="Projection allow-list")
    joins: tuple[JoinSpec, ...] = Field(default=())
    filter: str | None = Field(default=None, description="column = literal")
    order_by: str | None = Field(default=None, description="column [ASC|DESC]")
    limit: int | None = Field(default=None, ge=0)
    offset: int | None = Field(default=None, ge=0)
    export_sheet_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("exportSheetName", "exportName", "export_sheet_name"),
        serialization_alias="exportSheetName",
        description="Tabular only: persist the result as this sheet",
    )

    @property
    def has_projection(self) -> bool:
        return bool(self.columns)
