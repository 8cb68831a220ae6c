"""
Relational path — SQL compilation and DuckDB execution.

Usage:
    from playground.sql import SqlBuilder

    query = SqlBuilder().build(request)
    query.sql       # 'SELECT * FROM "employees" WHERE "dept" = $1'
    query.params    # ["Eng"]
"""

from .builder import SqlBuilder
from .engine import RelationalEngine
from .sql_utils import ParameterizedQuery

__all__ = [
    "SqlBuilder",
    "RelationalEngine",
    "ParameterizedQuery",
]
