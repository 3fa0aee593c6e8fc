#!/usr/bin/env python3
"""
Import catalog prices from a CSV file.
Run it directly with `--csv path/to/prices.csv`; it prints a JSON summary and exits non-zero
when any row or file-level error was recorded.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from rental_pricing.api.api_config import load_api_config
from rental_pricing.api.db_access import DatabaseClient
from rental_pricing.catalog.ddl import apply_catalog_ddl
from rental_pricing.catalog.price_import import PriceImporter, PriceImportStore
from rental_pricing.common.logging import configure_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import rental prices from a CSV file")
    parser.add_argument("--csv", required=True, type=Path, help="CSV file with one price per row")
    parser.add_argument(
        "--apply-ddl",
        action="store_true",
        help="Create the catalog tables before importing",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging()

    config = load_api_config()
    db = DatabaseClient(database_url=config.database_url)
    if args.apply_ddl:
        apply_catalog_ddl(db.engine)

    importer = PriceImporter(PriceImportStore(config=config, db=db))
    result = importer.import_csv(args.csv)
    print(json.dumps(result.to_dict(), indent=2))

    if result.has_errors:
        print(f"Price import finished with {len(result.errors)} error(s).", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
