#!/usr/bin/env python3
"""
Load a CSV file into a DuckDB table.

Usage:
    python scripts/load_csv.py employees.csv employees
    python scripts/load_csv.py orders.csv orders --replace --database data/other.duckdb
"""

import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from data import load_csv


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Load CSV into DuckDB")
    parser.add_argument("file", help="CSV file with a header row")
    parser.add_argument("table", help="Target table name")
    parser.add_argument("--database", default=config.DATABASE_PATH, help="DuckDB file")
    parser.add_argument("--replace", action="store_true", help="Drop the table first")
    args = parser.parse_args(argv)

    if not args.database:
        print("DATABASE_PATH is not configured", file=sys.stderr)
        return 1

    count = load_csv(args.file, args.table, args.database, replace=args.replace)
    print(f"{args.table}: {count} rows")
    return 0


if __name__ == "__main__":
    sys.exit(main())
