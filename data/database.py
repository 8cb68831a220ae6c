"""Database management — DuckDB relational store accessor.

The core only needs "execute(text, params) -> named columns + rows".
Each call opens its own connection and closes it before returning.
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import duckdb

from playground.errors import ConfigurationError, QueryTimeout, SourceNotFound

logger = logging.getLogger(__name__)


def init_database(db_path: str) -> None:
    """Create an empty database file (and its directory) if missing."""

    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    with duckdb.connect(db_path):
        pass


def get_connection(db_path: str, read_only: bool = False):
    """Get database connection."""
    return duckdb.connect(db_path, read_only=read_only)


@contextmanager
def interrupt_after(conn, timeout: float | None) -> Iterator[None]:
    """Interrupt the connection's running statement once `timeout` seconds pass."""
    if not timeout:
        yield
        return

    timer = threading.Timer(timeout, conn.interrupt)
    timer.daemon = True
    timer.start()
    try:
        yield
    finally:
        timer.cancel()


class Database:
    """
    Handle to one DuckDB database file.

    Args:
        path: Database file path (None/empty = not configured)
        timeout: Default statement deadline in seconds
    """

    def __init__(self, path: str | None, timeout: float | None = None):
        self.path = path
        self.timeout = timeout

    def _require_path(self) -> str:
        if not self.path:
            raise ConfigurationError("Database path not configured (DATABASE_PATH).")
        if not Path(self.path).exists():
            raise SourceNotFound(f"Database file not found: {self.path}")
        return self.path

    @contextmanager
    def connect(self, read_only: bool = True) -> Iterator[duckdb.DuckDBPyConnection]:
        """Scoped connection, always closed on exit."""
        conn = get_connection(self._require_path(), read_only=read_only)
        try:
            yield conn
        finally:
            conn.close()

    def run_query(
        self,
        sql: str,
        params: list[Any] | None = None,
        timeout: float | None = None,
    ) -> tuple[list[str], list[tuple]]:
        """
        Execute one statement and fetch everything.

        Args:
            sql: Statement with $n placeholders
            params: Values for the placeholders
            timeout: Deadline in seconds (defaults to the handle's timeout)

        Returns:
            (column names, rows as tuples)

        Raises:
            QueryTimeout: Deadline elapsed and the statement was interrupted
        """
        timeout = timeout if timeout is not None else self.timeout

        with self.connect(read_only=True) as conn:
            try:
                with interrupt_after(conn, timeout):
                    cursor = conn.execute(sql, params or [])
                    columns = [c[0] for c in cursor.description] if cursor.description else []
                    rows = cursor.fetchall() if cursor.description else []
            except duckdb.InterruptException as e:
                logger.warning(f"Query interrupted after {timeout}s: {sql[:200]}")
                raise QueryTimeout(f"Query exceeded {timeout}s deadline") from e

        return columns, rows

    def list_tables(self) -> list[str]:
        """Names of user tables in the main schema."""
        with self.connect(read_only=True) as conn:
            rows = conn.execute("""
                SELECT table_name
                FROM information_schema.tables
                WHERE table_schema = 'main'
                ORDER BY table_name
            """).fetchall()
        return [row[0] for row in rows]
