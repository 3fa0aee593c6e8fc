# This file implements the cascading catalog resolution pipeline.
# It turns a partial filter set into the next dependent list, or a full filter set into priced vehicles.
# Each stage that yields nothing raises NotFoundError naming the resource and the filter context.
# The resolver only reads through its CatalogSource and never writes catalog data.

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from rental_pricing.catalog.errors import NotFoundError
from rental_pricing.catalog.models import (
    NO_SEASON_DEFINITION,
    FilterKey,
    PriceDefinition,
    PriceEntry,
    RateType,
    RentalLocation,
    Season,
    SeasonDefinition,
    TimeUnit,
    VehicleResult,
)
from rental_pricing.catalog.params import parse_vehicle_filters
from rental_pricing.catalog.source import CatalogSource

LOGGER = logging.getLogger("catalog")


def _unique(values: Iterable[int | None]) -> list[int]:
    seen: dict[int, None] = {}
    for value in values:
        if value is not None:
            seen.setdefault(value, None)
    return list(seen)


class CatalogResolver:
    """Resolves dependent catalog lists and priced vehicle results."""

    def __init__(self, *, source: CatalogSource) -> None:
        self.source = source

    def list_rental_locations(self) -> list[RentalLocation]:
        locations = self.source.find_rental_locations()
        if not locations:
            raise NotFoundError("rental locations")
        return locations

    def list_rate_types(self, rental_location_id: int) -> list[RateType]:
        associations = self.source.find_associations(rental_location_id=rental_location_id)
        rate_type_ids = _unique(a.rate_type_id for a in associations)
        if not rate_type_ids:
            raise NotFoundError("rate types", f"location '{rental_location_id}'")
        return self.source.find_rate_types(rate_type_ids)

    def list_season_definitions(self, rental_location_id: int, rate_type_id: int) -> list[SeasonDefinition]:
        context = f"location '{rental_location_id}' and rate type '{rate_type_id}'"

        price_definition_ids = self._price_definition_ids(rental_location_id, rate_type_id)
        if not price_definition_ids:
            raise NotFoundError("price definitions", context)

        price_definitions = self.source.find_price_definitions(price_definition_ids)
        season_definition_ids = _unique(pd.season_definition_id for pd in price_definitions)
        if not season_definition_ids:
            raise NotFoundError("season definitions", context)

        return self.source.find_season_definitions(season_definition_ids)

    def list_seasons(self, season_definition_id: int) -> list[Season]:
        seasons = self.source.find_seasons(season_definition_id)
        if not seasons:
            raise NotFoundError("seasons", f"season definition '{season_definition_id}'")
        return seasons

    def list_units(self) -> list[TimeUnit]:
        return list(TimeUnit)

    def resolve_vehicles(
        self,
        rental_location_id: int,
        rate_type_id: int,
        unit_id: int,
        season_definition_id: int | str | None = None,
        season_id: int | None = None,
    ) -> list[VehicleResult]:
        """Walk associations, price definitions and prices down to one result per category.

        `season_definition_id` may be an id, the "none" sentinel (only definitions without
        seasonal pricing) or None (no narrowing).
        """

        unit = TimeUnit.from_unit_id(unit_id)

        price_definition_ids = self._price_definition_ids(rental_location_id, rate_type_id)
        if not price_definition_ids:
            raise NotFoundError("price definitions", "the given filters")

        price_definitions = self._narrow_by_season_definition(price_definition_ids, season_definition_id)
        if not price_definitions:
            raise NotFoundError("price definitions", "the given season definition")
        LOGGER.debug(
            "Resolving vehicles location=%s rate_type=%s unit=%s candidates=%d",
            rental_location_id,
            rate_type_id,
            unit.value,
            len(price_definitions),
        )

        vehicles: list[VehicleResult] = []
        for price_definition in price_definitions:
            vehicle = self._build_vehicle(price_definition, rental_location_id, rate_type_id, unit, season_id)
            if vehicle is not None:
                vehicles.append(vehicle)

        if not vehicles:
            raise NotFoundError("vehicles", "your conditions")
        LOGGER.debug("Resolved %d vehicles", len(vehicles))
        return vehicles

    def resolve_selection(self, filters: Mapping[FilterKey, str]) -> list[VehicleResult]:
        """Validate a wizard snapshot and resolve its vehicles."""

        params = {FilterKey(key).param_name: value for key, value in filters.items()}
        return self.resolve_vehicles(**parse_vehicle_filters(params))

    def _price_definition_ids(self, rental_location_id: int, rate_type_id: int) -> list[int]:
        associations = self.source.find_associations(
            rental_location_id=rental_location_id,
            rate_type_id=rate_type_id,
        )
        return _unique(a.price_definition_id for a in associations)

    def _narrow_by_season_definition(
        self,
        price_definition_ids: list[int],
        season_definition_id: int | str | None,
    ) -> list[PriceDefinition]:
        if season_definition_id is None:
            return self.source.find_price_definitions(price_definition_ids)
        if season_definition_id == NO_SEASON_DEFINITION:
            candidates = self.source.find_price_definitions(price_definition_ids)
            return [pd for pd in candidates if pd.season_definition_id is None]
        return self.source.find_price_definitions(
            price_definition_ids,
            season_definition_id=int(season_definition_id),
        )

    def _build_vehicle(
        self,
        price_definition: PriceDefinition,
        rental_location_id: int,
        rate_type_id: int,
        unit: TimeUnit,
        season_id: int | None,
    ) -> VehicleResult | None:
        associations = self.source.find_associations(
            rental_location_id=rental_location_id,
            rate_type_id=rate_type_id,
            price_definition_id=price_definition.id,
        )
        if not associations or associations[0].category_id is None:
            return None
        category = self.source.find_category(associations[0].category_id)
        if category is None:
            return None

        prices = self.source.find_prices(price_definition.id)
        if season_id is not None:
            prices = [p for p in prices if p.season_id == season_id]
        prices = [p for p in prices if p.time_unit is unit]
        if not prices:
            return None

        return VehicleResult(
            id=category.id,
            name=category.name,
            prices=[PriceEntry.from_price(p) for p in prices],
        )
