#!/usr/bin/env python
"""
Sales Reporting Command Line

Usage:
    python -m sales_reporting.cli list
    python -m sales_reporting.cli run monthly-sales --year 2013
    python -m sales_reporting.cli run top-customers-by-spend --output out/top.parquet --format parquet
    python -m sales_reporting.cli seed --orders 5000 --force
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

import polars as pl
import structlog

from sales_reporting.config.logging import configure_logging
from sales_reporting.data import SampleDataGenerator, is_seeded, seed_database
from sales_reporting.database.connection import (
    close_database,
    create_schema,
    get_db,
    init_database,
)
from sales_reporting.reports import (
    ExportFormat,
    ReportError,
    ReportService,
    export_result,
    list_reports,
    result_to_frame,
)

logger = structlog.get_logger(__name__)


def cmd_list(args: argparse.Namespace) -> int:
    """Print the report catalogue."""
    if args.json:
        print(json.dumps([d.describe() for d in list_reports()], indent=2))
        return 0

    for definition in list_reports():
        accepts = ", ".join(definition.parameters) or "-"
        print(f"{definition.number:>2}  {definition.name.value:<36} {definition.title}  [{accepts}]")
    return 0


async def _run(args: argparse.Namespace) -> int:
    await init_database(args.database_url)
    try:
        async with get_db(read_only=True) as db:
            result = await ReportService(db).run(
                args.name,
                year=args.year,
                reference_date=args.reference_date,
                window_days=args.window_days,
                limit=args.limit,
            )
    finally:
        await close_database()

    if args.output:
        path = export_result(result, args.output, args.format)
        print(f"{result.title}: {result.row_count} rows written to {path}")
    elif args.json:
        print(json.dumps(result.to_payload(), indent=2))
    else:
        with pl.Config(tbl_rows=-1, tbl_hide_dataframe_shape=True):
            print(result.title)
            print(result_to_frame(result))
    return 0


async def _seed(args: argparse.Namespace) -> int:
    engine = await init_database(args.database_url)
    try:
        await create_schema(engine, drop_existing=args.force)

        async with get_db(read_only=True) as db:
            already_seeded = await is_seeded(db)
        if already_seeded:
            print("Database already contains orders; use --force to rebuild it", file=sys.stderr)
            return 1

        data = SampleDataGenerator(seed=args.seed).generate_all(
            n_customers=args.customers,
            n_orders=args.orders,
        )
        async with get_db() as db:
            counts = await seed_database(db, data)
    finally:
        await close_database()

    for table, rows in counts.items():
        print(f"{table:<22} {rows:>8,} rows")
    return 0


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sales-reports",
        description="Sales performance reports over the retail order schema",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy async URL (default: DATABASE_URL setting)",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List available reports")
    list_parser.add_argument("--json", action="store_true", help="Print the catalogue as JSON")

    run_parser = subparsers.add_parser("run", help="Run one report")
    run_parser.add_argument("name", help="Catalogue name, e.g. monthly-sales")
    run_parser.add_argument("--year", help="Target calendar year")
    run_parser.add_argument("--reference-date", help="Last day of the recent window (YYYY-MM-DD)")
    run_parser.add_argument("--window-days", help="Days before the reference date to include")
    run_parser.add_argument("--limit", help="Rows kept by top-N reports")
    run_parser.add_argument("--output", help="Export to this file instead of printing")
    run_parser.add_argument(
        "--format",
        default=ExportFormat.CSV.value,
        choices=[f.value for f in ExportFormat],
        help="Export format (default: csv)",
    )
    run_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    seed_parser = subparsers.add_parser("seed", help="Create the schema and load sample data")
    seed_parser.add_argument("--orders", type=_positive_int, default=2000, help="Orders to generate (default: 2000)")
    seed_parser.add_argument("--customers", type=_positive_int, default=300, help="Customers to generate (default: 300)")
    seed_parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    seed_parser.add_argument("--force", action="store_true", help="Drop and recreate existing tables")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.command == "list":
            return cmd_list(args)
        if args.command == "run":
            return asyncio.run(_run(args))
        return asyncio.run(_seed(args))
    except ReportError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
