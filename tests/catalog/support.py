# This file provides an in-memory catalog and SQLite helpers shared by the catalog tests.
# It exists so resolver, SQL source, and import tests all run against the same small catalog.
# The dataset covers seasonal and non-seasonal price definitions plus an association without a category.

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from rental_pricing.api.api_config import ApiConfig
from rental_pricing.api.db_access import DatabaseClient
from rental_pricing.catalog.ddl import apply_catalog_ddl
from rental_pricing.catalog.models import (
    Association,
    Category,
    Price,
    PriceDefinition,
    RateType,
    RentalLocation,
    Season,
    SeasonDefinition,
    TimeUnit,
)

SQLITE_DDL_PATH = Path(__file__).resolve().parent / "sqlite_catalog_tables.sql"

CATALOG_TABLES = {
    "rental_locations",
    "rate_types",
    "season_definitions",
    "seasons",
    "categories",
    "price_definitions",
    "category_rental_location_rate_types",
    "prices",
    "api_request_log",
}


def build_catalog_config() -> ApiConfig:
    return ApiConfig(
        api_name="Test Catalog API",
        environment="test",
        database_url="sqlite+pysqlite:///:memory:",
        allowed_table_names=set(CATALOG_TABLES),
    )


@dataclass
class InMemoryCatalogSource:
    """CatalogSource over plain lists; also counts lookups per method."""

    rental_locations: list[RentalLocation] = field(default_factory=list)
    rate_types: list[RateType] = field(default_factory=list)
    season_definitions: list[SeasonDefinition] = field(default_factory=list)
    seasons: list[Season] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    price_definitions: list[PriceDefinition] = field(default_factory=list)
    associations: list[Association] = field(default_factory=list)
    prices: list[Price] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)

    def find_associations(
        self,
        *,
        rental_location_id: int | None = None,
        rate_type_id: int | None = None,
        price_definition_id: int | None = None,
    ) -> list[Association]:
        self.calls.append("find_associations")
        return [
            a
            for a in self.associations
            if (rental_location_id is None or a.rental_location_id == rental_location_id)
            and (rate_type_id is None or a.rate_type_id == rate_type_id)
            and (price_definition_id is None or a.price_definition_id == price_definition_id)
        ]

    def find_price_definitions(
        self,
        ids: Iterable[int],
        season_definition_id: int | None = None,
    ) -> list[PriceDefinition]:
        self.calls.append("find_price_definitions")
        wanted = set(ids)
        return [
            pd
            for pd in self.price_definitions
            if pd.id in wanted
            and (season_definition_id is None or pd.season_definition_id == season_definition_id)
        ]

    def find_seasons(self, season_definition_id: int) -> list[Season]:
        self.calls.append("find_seasons")
        return [s for s in self.seasons if s.season_definition_id == season_definition_id]

    def find_prices(self, price_definition_id: int) -> list[Price]:
        self.calls.append("find_prices")
        return sorted(
            (p for p in self.prices if p.price_definition_id == price_definition_id),
            key=lambda p: p.id,
        )

    def find_category(self, category_id: int) -> Category | None:
        self.calls.append("find_category")
        return next((c for c in self.categories if c.id == category_id), None)

    def find_season_definitions(self, ids: Iterable[int]) -> list[SeasonDefinition]:
        self.calls.append("find_season_definitions")
        wanted = set(ids)
        return [sd for sd in self.season_definitions if sd.id in wanted]

    def find_rate_types(self, ids: Iterable[int]) -> list[RateType]:
        self.calls.append("find_rate_types")
        wanted = set(ids)
        return [rt for rt in self.rate_types if rt.id in wanted]

    def find_rental_locations(self) -> list[RentalLocation]:
        self.calls.append("find_rental_locations")
        linked = {a.rental_location_id for a in self.associations}
        return sorted((rl for rl in self.rental_locations if rl.id in linked), key=lambda rl: rl.name)


def _price(
    price_id: int,
    price_definition_id: int,
    season_id: int | None,
    units: int,
    unit: TimeUnit,
    amount: str,
) -> Price:
    return Price(
        id=price_id,
        price_definition_id=price_definition_id,
        season_id=season_id,
        units=units,
        time_unit=unit,
        amount=Decimal(amount),
    )


def sample_catalog() -> InMemoryCatalogSource:
    """Barcelona sells a seasonal Turismo; Madrid sells a non-seasonal Furgoneta."""

    return InMemoryCatalogSource(
        rental_locations=[
            RentalLocation(id=1, name="Barcelona"),
            RentalLocation(id=2, name="Madrid"),
            RentalLocation(id=3, name="Aeropuerto"),
        ],
        rate_types=[RateType(id=1, name="Standard"), RateType(id=2, name="Weekend")],
        season_definitions=[
            SeasonDefinition(id=1, name="High and low season"),
            SeasonDefinition(id=2, name="Holidays"),
        ],
        seasons=[
            Season(id=1, name="High", season_definition_id=1),
            Season(id=2, name="Low", season_definition_id=1),
            Season(id=3, name="Christmas", season_definition_id=2),
        ],
        categories=[
            Category(id=1, name="Turismo", code="TUR"),
            Category(id=2, name="Furgoneta", code="FUR"),
            Category(id=3, name="Monovolumen", code="MON"),
        ],
        price_definitions=[
            PriceDefinition(id=1, season_definition_id=1),
            PriceDefinition(id=2, season_definition_id=None),
            PriceDefinition(id=3, season_definition_id=2),
        ],
        associations=[
            Association(category_id=1, rental_location_id=1, rate_type_id=1, price_definition_id=1),
            Association(category_id=2, rental_location_id=2, rate_type_id=1, price_definition_id=2),
            Association(category_id=3, rental_location_id=2, rate_type_id=2, price_definition_id=3),
            Association(category_id=None, rental_location_id=1, rate_type_id=2, price_definition_id=2),
        ],
        prices=[
            _price(1, 1, None, 1, TimeUnit.DAYS, "50.0"),
            _price(2, 1, None, 2, TimeUnit.DAYS, "90.0"),
            _price(3, 1, None, 1, TimeUnit.HOURS, "8.5"),
            _price(4, 1, 1, 1, TimeUnit.MONTHS, "900.0"),
            _price(5, 1, 2, 1, TimeUnit.MONTHS, "700.0"),
            _price(6, 2, None, 1, TimeUnit.DAYS, "70.0"),
            _price(7, 2, None, 7, TimeUnit.DAYS, "400.0"),
            _price(8, 3, 3, 1, TimeUnit.DAYS, "120.0"),
        ],
    )


def create_sqlite_catalog(database_path: Path, catalog: InMemoryCatalogSource | None = None) -> DatabaseClient:
    """Create the catalog tables in a SQLite file and load the given dataset into them."""

    db = DatabaseClient(database_url=f"sqlite+pysqlite:///{database_path}")
    apply_catalog_ddl(db.engine, ddl_path=SQLITE_DDL_PATH)
    if catalog is not None:
        seed_catalog(db, catalog)
    return db


def seed_catalog(db: DatabaseClient, catalog: InMemoryCatalogSource) -> None:
    for rl in catalog.rental_locations:
        db.execute("INSERT INTO rental_locations (id, name) VALUES (:id, :name)", {"id": rl.id, "name": rl.name})
    for rt in catalog.rate_types:
        db.execute("INSERT INTO rate_types (id, name) VALUES (:id, :name)", {"id": rt.id, "name": rt.name})
    for sd in catalog.season_definitions:
        db.execute("INSERT INTO season_definitions (id, name) VALUES (:id, :name)", {"id": sd.id, "name": sd.name})
    for s in catalog.seasons:
        db.execute(
            "INSERT INTO seasons (id, name, season_definition_id) VALUES (:id, :name, :sd)",
            {"id": s.id, "name": s.name, "sd": s.season_definition_id},
        )
    for c in catalog.categories:
        db.execute(
            "INSERT INTO categories (id, code, name) VALUES (:id, :code, :name)",
            {"id": c.id, "code": c.code, "name": c.name},
        )
    for pd in catalog.price_definitions:
        db.execute(
            "INSERT INTO price_definitions (id, season_definition_id) VALUES (:id, :sd)",
            {"id": pd.id, "sd": pd.season_definition_id},
        )
    for a in catalog.associations:
        db.execute(
            """
            INSERT INTO category_rental_location_rate_types
                (category_id, rental_location_id, rate_type_id, price_definition_id)
            VALUES (:category_id, :rental_location_id, :rate_type_id, :price_definition_id)
            """,
            {
                "category_id": a.category_id,
                "rental_location_id": a.rental_location_id,
                "rate_type_id": a.rate_type_id,
                "price_definition_id": a.price_definition_id,
            },
        )
    for p in catalog.prices:
        db.execute(
            """
            INSERT INTO prices (id, price_definition_id, season_id, units, time_measurement, price)
            VALUES (:id, :price_definition_id, :season_id, :units, :time_measurement, :price)
            """,
            {
                "id": p.id,
                "price_definition_id": p.price_definition_id,
                "season_id": p.season_id,
                "units": p.units,
                "time_measurement": p.time_unit.value,
                "price": float(p.amount),
            },
        )
