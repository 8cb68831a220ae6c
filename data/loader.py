"""Data loading utilities"""

import re

import pandas as pd

from .database import Database, init_database, get_connection

TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def load_csv(
    file_path: str,
    table: str,
    db_path: str,
    replace: bool = False
) -> int:
    """
    Load CSV file into database.

    Column types are inferred by pandas; date columns stay text.

    Args:
        file_path: Path to CSV file
        table: Target table name (e.g. 'employees')
        db_path: Path to database
        replace: If True, drop and recreate the table; otherwise append

    Returns:
        Number of rows in the table after loading

    Expected CSV format:
        id,name,dept,hired
        1,Ann,Eng,2021-03-01
    """
    if not TABLE_NAME_PATTERN.match(table):
        raise ValueError(f"Invalid table name: '{table}'")

    # Initialize database if needed
    init_database(db_path)

    # Read CSV
    df = pd.read_csv(file_path)

    with get_connection(db_path) as conn:
        conn.register("incoming", df)
        if replace:
            conn.execute(f'DROP TABLE IF EXISTS "{table}"')

        exists = conn.execute(
            "SELECT COUNT(*) FROM information_schema.tables WHERE table_name = $1",
            [table],
        ).fetchone()[0]
        if exists:
            conn.execute(f'INSERT INTO "{table}" SELECT * FROM incoming')
        else:
            conn.execute(f'CREATE TABLE "{table}" AS SELECT * FROM incoming')
        conn.unregister("incoming")

        # Get count
        result = conn.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()

    return result[0]


def get_data_info(db_path: str) -> pd.DataFrame:
    """Get summary of loaded tables: name, row count, column count."""

    database = Database(db_path)
    tables = database.list_tables()

    with database.connect(read_only=True) as conn:
        records = []
        for table in tables:
            rows = conn.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()[0]
            columns = conn.execute(
                "SELECT COUNT(*) FROM information_schema.columns WHERE table_name = $1",
                [table],
            ).fetchone()[0]
            records.append({"table": table, "rows": int(rows), "columns": int(columns)})

    return pd.DataFrame(records, columns=["table", "rows", "columns"])
