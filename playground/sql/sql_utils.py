"""SQL utilities for safe query building.

Provides validation and quoting functions to prevent SQL injection:
- validate_*() functions check identifier format
- quote_*() functions return quoted SQL identifiers
- ParameterizedQuery carries values separately from the SQL text

Example:
    quote_identifier("orders.emp_id")   # '"orders"."emp_id"'
    quote_identifier("order")           # '"order"'
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from playground.errors import UnsafeExpression


# =============================================================================
# Validation Patterns
# =============================================================================

# One identifier part: letters, digits, underscore; not starting with a digit
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


# =============================================================================
# Parameterized Query
# =============================================================================

@dataclass
class ParameterizedQuery:
    """
    SQL statement with parameters for safe execution.

    Attributes:
        sql: SQL template with placeholders ($1, $2, ...)
        params: Values for placeholders

    Example:
        query = ParameterizedQuery(
            sql='SELECT * FROM "employees" WHERE "dept" = $1',
            params=["Eng"]
        )
        conn.execute(query.sql, query.params)
    """

    sql: str
    params: list[Any] = field(default_factory=list)

    def add_param(self, value: Any) -> str:
        """Register a value and return its placeholder."""
        self.params.append(value)
        return f"${len(self.params)}"

    def to_raw_sql(self) -> str:
        """
        For debugging: SQL with values substituted.

        WARNING: Never execute this! Logs only.
        """
        result = self.sql
        # Replace highest index first so $1 does not clobber $10
        for i in range(len(self.params), 0, -1):
            param = self.params[i - 1]
            if isinstance(param, str):
                value = "'" + param.replace("'", "''") + "'"
            else:
                value = str(param)
            result = result.replace(f"${i}", value)
        return result


# =============================================================================
# Validation Functions
# =============================================================================

def validate_identifier(value: str, field_name: str = "identifier") -> str:
    """
    Validate a (possibly dotted) identifier such as `dept` or `orders.id`.

    Args:
        value: Identifier text
        field_name: Field name for the error message

    Returns:
        The stripped identifier

    Raises:
        UnsafeExpression: If any part is not a plain identifier
    """
    stripped = value.strip()
    parts = stripped.split(".")
    if not stripped or not all(IDENTIFIER_PATTERN.match(part) for part in parts):
        raise UnsafeExpression(
            f"Invalid {field_name}: '{value}'. "
            "Expected letters, digits and underscores (optionally table.column)"
        )
    return stripped


def quote_identifier(value: str, field_name: str = "identifier") -> str:
    """Validate and double-quote every part of a dotted identifier."""
    validated = validate_identifier(value, field_name)
    return ".".join(f'"{part}"' for part in validated.split("."))


def quote_column(value: str) -> str:
    """Quote a projection entry; `*` and `table.*` pass through."""
    stripped = value.strip()
    if stripped == "*":
        return "*"
    if stripped.endswith(".*"):
        return quote_identifier(stripped[:-2], "column") + ".*"
    return quote_identifier(stripped, "column")


def qualified(table: str, column: str) -> str:
    """Quoted `"table"."column"`."""
    return f"{quote_identifier(table, 'table')}.{quote_identifier(column, 'column')}"
