"""Shared fixtures: a small workbook and a DuckDB database with the same data."""

import duckdb
import pytest

from data import Database, WorkbookStore, create_workbook


EMPLOYEES = [
    ["id", "name", "dept"],
    ["1", "Ann", "Eng"],
    ["2", "Bob", "Ops"],
]

DEPTS = [
    ["code", "name", "floor"],
    ["Eng", "Engineering", "3"],
    ["Ops", "Operations", "1"],
]

ORDERS = [
    ["order_id", "emp_id", "amount"],
    ["100", "1", "25.5"],
    ["101", "1", "7"],
    ["102", "2", "120"],
    ["103", "9", "3"],
]


@pytest.fixture
def workbook_path(tmp_path):
    return create_workbook(
        tmp_path / "playground.xlsx",
        {"Employees": EMPLOYEES, "Depts": DEPTS, "Orders": ORDERS},
    )


@pytest.fixture
def workbook(workbook_path):
    return WorkbookStore(str(workbook_path))


@pytest.fixture
def database_path(tmp_path):
    path = tmp_path / "playground.duckdb"
    with duckdb.connect(str(path)) as conn:
        conn.execute("""
            CREATE TABLE employees (
                id INTEGER,
                name VARCHAR,
                dept VARCHAR,
                hired DATE,
                salary DOUBLE
            )
        """)
        conn.execute("""
            INSERT INTO employees VALUES
                (1, 'Ann', 'Eng', '2021-03-01', 120000.5),
                (2, 'Bob', 'Ops', '2019-07-15', 90000),
                (3, 'Cid', 'Eng', NULL, NULL)
        """)
        conn.execute("""
            CREATE TABLE orders (
                order_id INTEGER,
                emp_id INTEGER,
                amount DOUBLE
            )
        """)
        conn.execute("""
            INSERT INTO orders VALUES
                (100, 1, 25.5),
                (101, 1, 7),
                (102, 2, 120)
        """)
    return path


@pytest.fixture
def database(database_path):
    return Database(str(database_path))
