# This module declares the read-only catalog lookups the resolver depends on.
# Any storage backend can serve the resolver as long as it answers these queries.

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

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


class CatalogSource(Protocol):
    def find_associations(
        self,
        *,
        rental_location_id: int | None = None,
        rate_type_id: int | None = None,
        price_definition_id: int | None = None,
    ) -> list[Association]: ...

    def find_price_definitions(
        self,
        ids: Iterable[int],
        season_definition_id: int | None = None,
    ) -> list[PriceDefinition]: ...

    def find_seasons(self, season_definition_id: int) -> list[Season]: ...

    def find_prices(self, price_definition_id: int) -> list[Price]: ...

    def find_category(self, category_id: int) -> Category | None: ...

    def find_season_definitions(self, ids: Iterable[int]) -> list[SeasonDefinition]: ...

    def find_rate_types(self, ids: Iterable[int]) -> list[RateType]: ...

    def find_rental_locations(self) -> list[RentalLocation]: ...
