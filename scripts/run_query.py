#!/usr/bin/env python3
"""
Run one query from the command line.

Usage:
    python scripts/run_query.py --engine tabular --table Employees --filter "dept = Eng"
    python scripts/run_query.py --engine relational --table employees \
        --join orders:id:emp_id --order-by "id DESC" --limit 10 --json
    python scripts/run_query.py --engine tabular --table Employees --export EngOnly
"""

import sys
import json
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from data import Database, WorkbookStore
from playground import JoinSpec, QueryError, QueryRequest, QueryService
from playground.sql import RelationalEngine, SqlBuilder


def parse_join(text: str) -> JoinSpec:
    """TABLE:LEFT:RIGHT → JoinSpec."""
    parts = text.split(":")
    if len(parts) != 3 or not all(parts):
        raise argparse.ArgumentTypeError(f"Join must be TABLE:LEFT:RIGHT, got '{text}'")
    table, left, right = parts
    return JoinSpec(table=table, left_column=left, right_column=right)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Execute a declarative query")
    parser.add_argument("--engine", required=True, help="relational | tabular")
    parser.add_argument("--table", required=True, help="Base table or sheet")
    parser.add_argument("--columns", nargs="+", help="Columns to keep")
    parser.add_argument("--join", action="append", type=parse_join, default=[],
                        metavar="TABLE:LEFT:RIGHT", help="Inner join (repeatable)")
    parser.add_argument("--filter", help="column = value")
    parser.add_argument("--order-by", help="column [ASC|DESC]")
    parser.add_argument("--limit", type=int)
    parser.add_argument("--offset", type=int)
    parser.add_argument("--export", help="Tabular: write result to this sheet")
    parser.add_argument("--database", default=config.DATABASE_PATH, help="DuckDB file")
    parser.add_argument("--workbook", default=config.WORKBOOK_PATH, help="Excel file")
    parser.add_argument("--timeout", type=float, default=config.QUERY_TIMEOUT)
    parser.add_argument("--raw-sql", action="store_true", default=config.RAW_SQL_FRAGMENTS,
                        help="Interpolate SQL fragments verbatim (unsafe)")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    request = QueryRequest(
        engine=args.engine,
        table=args.table,
        columns=args.columns,
        joins=args.join,
        filter=args.filter,
        order_by=args.order_by,
        limit=args.limit,
        offset=args.offset,
        export_sheet_name=args.export,
    )
    service = QueryService(
        Database(args.database),
        WorkbookStore(args.workbook),
        relational=RelationalEngine(SqlBuilder(raw_fragments=args.raw_sql)),
    )

    try:
        result = service.execute(request, timeout=args.timeout)
    except QueryError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_records(), indent=2, ensure_ascii=False))
    elif result:
        print(result.to_frame().to_string(index=False))
    else:
        print("(no rows)")

    for warning in result.warnings:
        print(f"WARNING: {warning}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
