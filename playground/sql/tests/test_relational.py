"""
Tests for the relational engine against a real DuckDB file.

Run: pytest playground/sql/tests/test_relational.py -v
"""

import threading
from datetime import datetime

import duckdb
import pytest

from data import Database
from data import database as database_module
from data.database import interrupt_after
from playground import (
    ConfigurationError,
    NULL,
    Number,
    QueryRequest,
    QueryTimeout,
    SourceNotFound,
    Text,
    Timestamp,
)
from playground.sql import RelationalEngine, SqlBuilder


def run(database, raw=False, **fields):
    request = QueryRequest(engine="relational", **fields)
    return RelationalEngine(SqlBuilder(raw_fragments=raw)).execute(request, database)


class TestExecution:

    def test_native_types(self, database):
        result = run(database, table="employees", order_by="id")

        first = result[0]
        assert first["id"] == Number(1)
        assert first["name"] == Text("Ann")
        assert first["hired"] == Timestamp(datetime(2021, 3, 1))
        assert first["salary"] == Number(120000.5)
        assert result[2]["hired"] is NULL

    def test_records(self, database):
        result = run(database, table="employees", columns=["id", "hired"], filter="name = Ann")
        assert result.to_records() == [{"id": 1, "hired": "2021-03-01T00:00:00"}]

    def test_join(self, database):
        result = run(
            database,
            table="employees",
            joins=[{"table": "orders", "leftColumn": "id", "rightColumn": "emp_id"}],
            columns=["order_id", "name", "amount"],
            order_by="order_id",
        )
        assert result.to_records() == [
            {"order_id": 100, "name": "Ann", "amount": 25.5},
            {"order_id": 101, "name": "Ann", "amount": 7},
            {"order_id": 102, "name": "Bob", "amount": 120},
        ]

    def test_pagination(self, database):
        full = run(database, table="employees", order_by="id").to_records()
        page = run(database, table="employees", order_by="id", limit=1, offset=1).to_records()
        assert page == full[1:2]
        assert run(database, table="employees", offset=50).to_records() == []

    def test_raw_mode_range_filter(self, database):
        result = run(database, raw=True, table="employees", filter="salary > 100000")
        assert [r["name"] for r in result.to_records()] == ["Ann"]

    def test_missing_table_surfaces_driver_error(self, database):
        with pytest.raises(duckdb.CatalogException):
            run(database, table="nope")


class TestErrors:

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceNotFound):
            run(Database(str(tmp_path / "absent.duckdb")), table="t")

    def test_not_configured(self):
        with pytest.raises(ConfigurationError):
            run(Database(None), table="t")

    def test_interrupt_becomes_timeout(self, database, monkeypatch):
        class InterruptingConnection:
            def execute(self, sql, params):
                raise duckdb.InterruptException("INTERRUPT Error: Interrupted!")

            def interrupt(self):
                pass

            def close(self):
                pass

        monkeypatch.setattr(
            database_module, "get_connection", lambda path, read_only=False: InterruptingConnection()
        )
        with pytest.raises(QueryTimeout):
            database.run_query("SELECT 1", timeout=1)


def test_interrupt_after_fires():
    fired = threading.Event()

    class Conn:
        def interrupt(self):
            fired.set()

    with interrupt_after(Conn(), 0.01):
        assert fired.wait(2)


def test_interrupt_after_cancelled():
    fired = threading.Event()

    class Conn:
        def interrupt(self):
            fired.set()

    with interrupt_after(Conn(), 0.2):
        pass
    assert not fired.wait(0.4)


def test_list_tables(database):
    assert database.list_tables() == ["employees", "orders"]
