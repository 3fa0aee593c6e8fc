# This file implements the catalog lookups over the relational catalog tables.
# It exists so the resolver can stay storage-agnostic while production reads go through SQLAlchemy.
# Table names come from ApiConfig and are validated before they are placed in SQL text.
# Driver failures are re-raised as DatabaseError so the HTTP layer can map them to 500.

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from rental_pricing.api.api_config import ApiConfig
from rental_pricing.api.db_access import DatabaseClient
from rental_pricing.catalog.errors import DatabaseError
from rental_pricing.catalog.models import (
    Association,
    Category,
    Price,
    PriceDefinition,
    RateType,
    RentalLocation,
    Season,
    SeasonDefinition,
)


class SqlCatalogSource:
    """Read-only catalog source backed by a DatabaseClient."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db
        self.rental_location_table = config.validate_table_name(config.rental_location_table_name)
        self.rate_type_table = config.validate_table_name(config.rate_type_table_name)
        self.season_definition_table = config.validate_table_name(config.season_definition_table_name)
        self.season_table = config.validate_table_name(config.season_table_name)
        self.category_table = config.validate_table_name(config.category_table_name)
        self.price_definition_table = config.validate_table_name(config.price_definition_table_name)
        self.association_table = config.validate_table_name(config.association_table_name)
        self.price_table = config.validate_table_name(config.price_table_name)

    def find_associations(
        self,
        *,
        rental_location_id: int | None = None,
        rate_type_id: int | None = None,
        price_definition_id: int | None = None,
    ) -> list[Association]:
        where_clauses: list[str] = ["1 = 1"]
        params: dict[str, Any] = {}

        if rental_location_id is not None:
            where_clauses.append("a.rental_location_id = :rental_location_id")
            params["rental_location_id"] = rental_location_id
        if rate_type_id is not None:
            where_clauses.append("a.rate_type_id = :rate_type_id")
            params["rate_type_id"] = rate_type_id
        if price_definition_id is not None:
            where_clauses.append("a.price_definition_id = :price_definition_id")
            params["price_definition_id"] = price_definition_id

        query = f"""
        SELECT
            a.category_id,
            a.rental_location_id,
            a.rate_type_id,
            a.price_definition_id
        FROM {self.association_table} a
        WHERE {" AND ".join(where_clauses)}
        ORDER BY a.price_definition_id, a.category_id
        """
        rows = self._fetch_all("category rental location rate types", query, params)
        return [
            Association(
                category_id=row["category_id"],
                rental_location_id=row["rental_location_id"],
                rate_type_id=row["rate_type_id"],
                price_definition_id=row["price_definition_id"],
            )
            for row in rows
        ]

    def find_price_definitions(
        self,
        ids: Iterable[int],
        season_definition_id: int | None = None,
    ) -> list[PriceDefinition]:
        id_list = list(ids)
        if not id_list:
            return []

        params: dict[str, Any] = {"ids": id_list}
        season_clause = ""
        if season_definition_id is not None:
            season_clause = "AND pd.season_definition_id = :season_definition_id"
            params["season_definition_id"] = season_definition_id

        query = f"""
        SELECT pd.id, pd.season_definition_id
        FROM {self.price_definition_table} pd
        WHERE pd.id IN :ids
        {season_clause}
        ORDER BY pd.id
        """
        rows = self._fetch_all("price definitions", query, params, expanding=("ids",))
        return [PriceDefinition(id=row["id"], season_definition_id=row["season_definition_id"]) for row in rows]

    def find_seasons(self, season_definition_id: int) -> list[Season]:
        query = f"""
        SELECT s.id, s.name, s.season_definition_id
        FROM {self.season_table} s
        WHERE s.season_definition_id = :season_definition_id
        ORDER BY s.id
        """
        rows = self._fetch_all("seasons", query, {"season_definition_id": season_definition_id})
        return [
            Season(id=row["id"], name=row["name"], season_definition_id=row["season_definition_id"])
            for row in rows
        ]

    def find_prices(self, price_definition_id: int) -> list[Price]:
        query = f"""
        SELECT p.id, p.price_definition_id, p.season_id, p.units, p.time_measurement, p.price
        FROM {self.price_table} p
        WHERE p.price_definition_id = :price_definition_id
        ORDER BY p.id
        """
        rows = self._fetch_all("prices", query, {"price_definition_id": price_definition_id})
        return [
            Price(
                id=row["id"],
                price_definition_id=row["price_definition_id"],
                season_id=row["season_id"],
                units=int(row["units"]),
                time_unit=row["time_measurement"],
                amount=Decimal(str(row["price"])),
            )
            for row in rows
        ]

    def find_category(self, category_id: int) -> Category | None:
        query = f"""
        SELECT c.id, c.name, c.code
        FROM {self.category_table} c
        WHERE c.id = :category_id
        """
        try:
            row = self.db.fetch_one(query, {"category_id": category_id})
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to fetch category: {exc}") from exc
        if row is None:
            return None
        return Category(id=row["id"], name=row["name"], code=row["code"])

    def find_season_definitions(self, ids: Iterable[int]) -> list[SeasonDefinition]:
        id_list = list(ids)
        if not id_list:
            return []
        query = f"""
        SELECT sd.id, sd.name
        FROM {self.season_definition_table} sd
        WHERE sd.id IN :ids
        ORDER BY sd.id
        """
        rows = self._fetch_all("season definitions", query, {"ids": id_list}, expanding=("ids",))
        return [SeasonDefinition(id=row["id"], name=row["name"]) for row in rows]

    def find_rate_types(self, ids: Iterable[int]) -> list[RateType]:
        id_list = list(ids)
        if not id_list:
            return []
        query = f"""
        SELECT rt.id, rt.name
        FROM {self.rate_type_table} rt
        WHERE rt.id IN :ids
        ORDER BY rt.id
        """
        rows = self._fetch_all("rate types", query, {"ids": id_list}, expanding=("ids",))
        return [RateType(id=row["id"], name=row["name"]) for row in rows]

    def find_rental_locations(self) -> list[RentalLocation]:
        query = f"""
        SELECT DISTINCT rl.id, rl.name
        FROM {self.rental_location_table} rl
        JOIN {self.association_table} a ON a.rental_location_id = rl.id
        ORDER BY rl.name, rl.id
        """
        rows = self._fetch_all("rental locations", query, {})
        return [RentalLocation(id=row["id"], name=row["name"]) for row in rows]

    def _fetch_all(
        self,
        what: str,
        query: str,
        params: dict[str, Any],
        *,
        expanding: tuple[str, ...] = (),
    ) -> list[dict[str, Any]]:
        try:
            return self.db.fetch_all(query, params, expanding=expanding)
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to fetch {what}: {exc}") from exc
