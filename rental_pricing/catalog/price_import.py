# This file implements the bulk CSV price import job for the catalog.
# It exists so operators can load or refresh price grids without touching the database by hand.
# Every row is validated and resolved independently; a bad row is recorded and never aborts the run.
# Prices are the only catalog rows this job writes.

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import IO, Any

import pandas as pd
from sqlalchemy import Numeric
from sqlalchemy.exc import SQLAlchemyError

from rental_pricing.api.api_config import ApiConfig
from rental_pricing.api.db_access import DatabaseClient
from rental_pricing.catalog.models import UNIT_BY_ID, TimeUnit

LOGGER = logging.getLogger("catalog.import")

REQUIRED_HEADERS: tuple[str, ...] = (
    "category_code",
    "rental_location_name",
    "rate_type_name",
    "season_name",
    "units",
    "price",
    "time_measurement",
)

_TEXT_FIELDS: tuple[str, ...] = ("category_code", "rental_location_name", "rate_type_name")
_INTEGER_RE = re.compile(r"^[+]?\d+$")
_CENTS = Decimal("0.01")

# matches the NUMERIC(12, 2) prices column
_PRICE_BIND_TYPES = {"price": Numeric(12, 2, asdecimal=True)}


@dataclass
class PriceImportResult:
    imported_count: int = 0
    updated_count: int = 0
    skipped_count: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "imported_count": self.imported_count,
            "updated_count": self.updated_count,
            "skipped_count": self.skipped_count,
            "errors": list(self.errors),
        }


@dataclass(frozen=True)
class PriceRow:
    line_number: int
    category_code: str
    rental_location_name: str
    rate_type_name: str
    season_name: str
    units: int
    price: Decimal
    time_unit: TimeUnit


class PriceImportStore:
    """SQL lookups and price writes used by the importer."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.db = db
        self.rental_location_table = config.validate_table_name(config.rental_location_table_name)
        self.rate_type_table = config.validate_table_name(config.rate_type_table_name)
        self.season_table = config.validate_table_name(config.season_table_name)
        self.category_table = config.validate_table_name(config.category_table_name)
        self.price_definition_table = config.validate_table_name(config.price_definition_table_name)
        self.association_table = config.validate_table_name(config.association_table_name)
        self.price_table = config.validate_table_name(config.price_table_name)

    def find_category_id(self, code: str) -> int | None:
        return self._first_id(f"SELECT id FROM {self.category_table} WHERE code = :value ORDER BY id", code)

    def find_rental_location_id(self, name: str) -> int | None:
        return self._first_id(f"SELECT id FROM {self.rental_location_table} WHERE name = :value ORDER BY id", name)

    def find_rate_type_id(self, name: str) -> int | None:
        return self._first_id(f"SELECT id FROM {self.rate_type_table} WHERE name = :value ORDER BY id", name)

    def find_season_id(self, name: str, *, season_definition_id: int) -> int | None:
        row = self.db.fetch_one(
            f"""
            SELECT id
            FROM {self.season_table}
            WHERE name = :value
              AND season_definition_id = :season_definition_id
            ORDER BY id
            """,
            {"value": name, "season_definition_id": season_definition_id},
        )
        return None if row is None else int(row["id"])

    def find_price_definition_id(self, *, category_id: int, rental_location_id: int, rate_type_id: int) -> int | None:
        row = self.db.fetch_one(
            f"""
            SELECT price_definition_id
            FROM {self.association_table}
            WHERE category_id = :category_id
              AND rental_location_id = :rental_location_id
              AND rate_type_id = :rate_type_id
            """,
            {
                "category_id": category_id,
                "rental_location_id": rental_location_id,
                "rate_type_id": rate_type_id,
            },
        )
        return None if row is None else int(row["price_definition_id"])

    def find_season_definition_id(self, price_definition_id: int) -> int | None:
        row = self.db.fetch_one(
            f"SELECT season_definition_id FROM {self.price_definition_table} WHERE id = :price_definition_id",
            {"price_definition_id": price_definition_id},
        )
        if row is None or row["season_definition_id"] is None:
            return None
        return int(row["season_definition_id"])

    def existing_units(self, price_definition_id: int) -> list[int]:
        rows = self.db.fetch_all(
            f"""
            SELECT DISTINCT units
            FROM {self.price_table}
            WHERE price_definition_id = :price_definition_id
            ORDER BY units
            """,
            {"price_definition_id": price_definition_id},
        )
        return [int(row["units"]) for row in rows]

    def find_price_id(
        self,
        *,
        price_definition_id: int,
        season_id: int | None,
        units: int,
        time_unit: TimeUnit,
    ) -> int | None:
        season_clause = "season_id IS NULL" if season_id is None else "season_id = :season_id"
        row = self.db.fetch_one(
            f"""
            SELECT id
            FROM {self.price_table}
            WHERE price_definition_id = :price_definition_id
              AND {season_clause}
              AND units = :units
              AND time_measurement = :time_measurement
            ORDER BY id
            """,
            {
                "price_definition_id": price_definition_id,
                "season_id": season_id,
                "units": units,
                "time_measurement": time_unit.value,
            },
        )
        return None if row is None else int(row["id"])

    def update_price(self, price_id: int, *, amount: Decimal, time_unit: TimeUnit) -> None:
        self.db.execute(
            f"""
            UPDATE {self.price_table}
            SET price = :price, time_measurement = :time_measurement
            WHERE id = :price_id
            """,
            {"price": amount, "time_measurement": time_unit.value, "price_id": price_id},
            types=_PRICE_BIND_TYPES,
        )

    def insert_price(
        self,
        *,
        price_definition_id: int,
        season_id: int | None,
        units: int,
        time_unit: TimeUnit,
        amount: Decimal,
    ) -> None:
        self.db.execute(
            f"""
            INSERT INTO {self.price_table} (price_definition_id, season_id, units, time_measurement, price)
            VALUES (:price_definition_id, :season_id, :units, :time_measurement, :price)
            """,
            {
                "price_definition_id": price_definition_id,
                "season_id": season_id,
                "units": units,
                "time_measurement": time_unit.value,
                "price": amount,
            },
            types=_PRICE_BIND_TYPES,
        )

    def _first_id(self, query: str, value: str) -> int | None:
        row = self.db.fetch_one(query, {"value": value})
        return None if row is None else int(row["id"])


class PriceImporter:
    """Imports price rows from CSV into the catalog through a PriceImportStore."""

    def __init__(self, store: PriceImportStore) -> None:
        self.store = store

    def import_csv(self, source: str | Path | IO[str]) -> PriceImportResult:
        result = PriceImportResult()

        frame = self._read_frame(source, result)
        if frame is None:
            return result

        missing_headers = [header for header in REQUIRED_HEADERS if header not in frame.columns]
        for header in missing_headers:
            result.add_error(f"Missing required header: {header}")
        if missing_headers:
            return result

        for offset, record in enumerate(frame.to_dict(orient="records")):
            line_number = offset + 2
            try:
                self._import_row(record, line_number, result)
            except SQLAlchemyError as exc:
                LOGGER.warning("Database error on line %d: %s", line_number, exc)
                result.add_error(f"Error processing line {line_number}: {exc}")

        LOGGER.info(
            "Price import finished imported=%d updated=%d skipped=%d errors=%d",
            result.imported_count,
            result.updated_count,
            result.skipped_count,
            len(result.errors),
        )
        return result

    def _read_frame(self, source: str | Path | IO[str], result: PriceImportResult) -> pd.DataFrame | None:
        try:
            frame = pd.read_csv(source, dtype=str, keep_default_na=False)
        except (OSError, UnicodeDecodeError) as exc:
            result.add_error(f"Error reading file: {exc}")
            return None
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            result.add_error(f"Error parsing CSV: {exc}")
            return None

        frame.columns = [str(column).strip().lower().replace(" ", "_") for column in frame.columns]
        return frame

    def _import_row(self, record: dict[str, Any], line_number: int, result: PriceImportResult) -> None:
        row = self._parse_row(record, line_number, result)
        if row is None:
            return

        price_definition_id = self._resolve_price_definition(row, result)
        if price_definition_id is None:
            return

        season_id: int | None = None
        if row.season_name:
            season_id = self._resolve_season(row, price_definition_id, result)
            if season_id is None:
                return

        existing_units = self.store.existing_units(price_definition_id)
        if existing_units and row.units not in existing_units:
            listed = ", ".join(str(units) for units in existing_units)
            result.add_error(
                f"Line {line_number}: Units '{row.units}' not defined in price definition. "
                f"Existing units: {listed}"
            )
            result.skipped_count += 1
            return

        price_id = self.store.find_price_id(
            price_definition_id=price_definition_id,
            season_id=season_id,
            units=row.units,
            time_unit=row.time_unit,
        )
        if price_id is not None:
            self.store.update_price(price_id, amount=row.price, time_unit=row.time_unit)
            result.updated_count += 1
        else:
            self.store.insert_price(
                price_definition_id=price_definition_id,
                season_id=season_id,
                units=row.units,
                time_unit=row.time_unit,
                amount=row.price,
            )
            result.imported_count += 1

    def _parse_row(self, record: dict[str, Any], line_number: int, result: PriceImportResult) -> PriceRow | None:
        values = {header: str(record.get(header, "") or "").strip() for header in REQUIRED_HEADERS}
        valid = True

        for name in _TEXT_FIELDS:
            if not values[name]:
                result.add_error(f"Line {line_number}: {name} is required")
                valid = False

        units = int(values["units"]) if _INTEGER_RE.match(values["units"]) else 0
        if units <= 0:
            result.add_error(f"Line {line_number}: units must be a positive integer")
            valid = False

        try:
            price = Decimal(values["price"])
        except InvalidOperation:
            price = None
        if price is None or not price.is_finite() or price < 0:
            result.add_error(f"Line {line_number}: price must be a non-negative number")
            valid = False
        elif not _has_cents_precision(price):
            result.add_error(f"Line {line_number}: price must have at most two decimal places")
            valid = False

        measurement = int(values["time_measurement"]) if _INTEGER_RE.match(values["time_measurement"]) else 0
        if measurement not in UNIT_BY_ID:
            result.add_error(
                f"Line {line_number}: time_measurement must be 1 (months), 2 (days), 3 (hours), or 4 (minutes)"
            )
            valid = False

        if not valid:
            return None
        return PriceRow(
            line_number=line_number,
            category_code=values["category_code"],
            rental_location_name=values["rental_location_name"],
            rate_type_name=values["rate_type_name"],
            season_name=values["season_name"],
            units=units,
            price=price,
            time_unit=UNIT_BY_ID[measurement],
        )

    def _resolve_price_definition(self, row: PriceRow, result: PriceImportResult) -> int | None:
        line = row.line_number
        category_id = self.store.find_category_id(row.category_code)
        if category_id is None:
            result.add_error(f"Line {line}: Category '{row.category_code}' not found")
            return None
        rental_location_id = self.store.find_rental_location_id(row.rental_location_name)
        if rental_location_id is None:
            result.add_error(f"Line {line}: Rental location '{row.rental_location_name}' not found")
            return None
        rate_type_id = self.store.find_rate_type_id(row.rate_type_name)
        if rate_type_id is None:
            result.add_error(f"Line {line}: Rate type '{row.rate_type_name}' not found")
            return None

        price_definition_id = self.store.find_price_definition_id(
            category_id=category_id,
            rental_location_id=rental_location_id,
            rate_type_id=rate_type_id,
        )
        if price_definition_id is None:
            result.add_error(
                f"Line {line}: No price definition found for category '{row.category_code}', "
                f"location '{row.rental_location_name}', and rate type '{row.rate_type_name}'"
            )
        return price_definition_id

    def _resolve_season(self, row: PriceRow, price_definition_id: int, result: PriceImportResult) -> int | None:
        """Seasons are only looked up inside the price definition's own season definition."""

        season_definition_id = self.store.find_season_definition_id(price_definition_id)
        if season_definition_id is None:
            result.add_error(
                f"Line {row.line_number}: Season '{row.season_name}' given but the price definition "
                "has no season definition"
            )
            return None

        season_id = self.store.find_season_id(row.season_name, season_definition_id=season_definition_id)
        if season_id is None:
            result.add_error(
                f"Line {row.line_number}: Season '{row.season_name}' not found "
                f"for season definition {season_definition_id}"
            )
        return season_id


def _has_cents_precision(price: Decimal) -> bool:
    try:
        return price == price.quantize(_CENTS)
    except InvalidOperation:
        return False
