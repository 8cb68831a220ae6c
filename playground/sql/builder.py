"""
SQL builder — compiles a QueryRequest into one SELECT statement.

Architecture:
    QueryRequest → SqlBuilder.build() → ParameterizedQuery → Database.run_query()

Statement shape:
    SELECT <columns|*> FROM <table>
    [INNER JOIN <j.table> ON <table>.<j.left> = <j.table>.<j.right>]*
    [WHERE <filter>] [ORDER BY <order>] [LIMIT n] [OFFSET n]

Two modes:
    safe (default): identifiers validated and quoted, the filter must be
        `column = literal` and is bound as a parameter, the order must be
        `column [ASC|DESC]`. Other input raises UnsafeExpression.
    raw: columns, table names, filter and order text are pasted in verbatim.
        This is an SQL injection surface; enable only for trusted callers.
"""

from __future__ import annotations

import logging

from playground.errors import UnsafeExpression
from playground.expressions import is_strict_order, parse_filter, parse_order
from playground.types import QueryRequest

from .sql_utils import ParameterizedQuery, qualified, quote_column, quote_identifier

logger = logging.getLogger(__name__)


class SqlBuilder:
    """
    Builds SQL from QueryRequest.

    Usage:
        builder = SqlBuilder()
        query = builder.build(request)
        query.sql       # 'SELECT * FROM "employees" WHERE "dept" = $1'
        query.params    # ["Eng"]

    SqlBuilder keeps no state between calls.
    """

    def __init__(self, raw_fragments: bool = False):
        self.raw_fragments = raw_fragments

    def build(self, request: QueryRequest) -> ParameterizedQuery:
        """
        Compile the request.

        Returns:
            ParameterizedQuery (no trailing semicolon)

        Raises:
            UnsafeExpression: Safe mode and a fragment is not compilable
        """
        query = ParameterizedQuery(sql="")
        parts = []

        # 1. SELECT
        parts.append(f"SELECT {self._build_select(request)}")

        # 2. FROM
        parts.append(f"FROM {self._table(request.table)}")

        # 3. INNER JOIN (chain in request order)
        for join in request.joins:
            parts.append(self._build_join(request.table, join))

        # 4. WHERE
        if request.filter and request.filter.strip():
            parts.append(f"WHERE {self._build_where(request.filter, query)}")

        # 5. ORDER BY
        if request.order_by and request.order_by.strip():
            parts.append(f"ORDER BY {self._build_order_by(request.order_by)}")

        # 6. LIMIT / OFFSET (validated ints)
        if request.limit is not None:
            parts.append(f"LIMIT {int(request.limit)}")
        if request.offset is not None:
            parts.append(f"OFFSET {int(request.offset)}")

        query.sql = " ".join(parts)
        logger.debug(f"Compiled SQL: {query.to_raw_sql()}")
        return query

    # =========================================================================
    # Clauses
    # =========================================================================

    def _table(self, name: str) -> str:
        if self.raw_fragments:
            return name
        return quote_identifier(name, "table")

    def _build_select(self, request: QueryRequest) -> str:
        if not request.has_projection:
            return "*"
        if self.raw_fragments:
            return ", ".join(request.columns)
        return ", ".join(quote_column(c) for c in request.columns)

    def _build_join(self, base_table: str, join) -> str:
        if self.raw_fragments:
            return (
                f"INNER JOIN {join.table} "
                f"ON {base_table}.{join.left_column} = {join.table}.{join.right_column}"
            )
        return (
            f"INNER JOIN {quote_identifier(join.table, 'table')} "
            f"ON {qualified(base_table, join.left_column)} = "
            f"{qualified(join.table, join.right_column)}"
        )

    def _build_where(self, text: str, query: ParameterizedQuery) -> str:
        if self.raw_fragments:
            return text

        predicate = parse_filter(text)
        if predicate is None:
            raise UnsafeExpression(
                f"Unsupported filter: '{text}'. Expected: column = value"
            )
        column = quote_identifier(predicate.column, "filter column")
        return f"{column} = {query.add_param(predicate.literal)}"

    def _build_order_by(self, text: str) -> str:
        if self.raw_fragments:
            return text

        order = parse_order(text)
        if order is None or not is_strict_order(text):
            raise UnsafeExpression(
                f"Unsupported order: '{text}'. Expected: column [ASC|DESC]"
            )
        return f"{quote_identifier(order.column, 'order column')} {order.direction}"
