# This module defines the catalog entities, the billing time units, and the filter identities.
# The same FilterKey enum keys the wizard state, the resolver inputs, and the HTTP query parameters.
# Entities are immutable; the engine only reads them, and only the import job writes prices.

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from rental_pricing.catalog.errors import ValidationError

NO_SEASON_DEFINITION = "none"


class TimeUnit(str, Enum):
    MONTHS = "months"
    DAYS = "days"
    HOURS = "hours"
    MINUTES = "minutes"

    @property
    def unit_id(self) -> int:
        return UNIT_IDS[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_unit_id(cls, unit_id: int) -> TimeUnit:
        """Map a 1-4 unit id to its time unit; anything else is rejected."""

        try:
            return UNIT_BY_ID[int(unit_id)]
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError("Unit ID must be between 1 and 4", field="unit-id") from exc


UNIT_BY_ID: dict[int, TimeUnit] = {
    1: TimeUnit.MONTHS,
    2: TimeUnit.DAYS,
    3: TimeUnit.HOURS,
    4: TimeUnit.MINUTES,
}
UNIT_IDS: dict[TimeUnit, int] = {unit: unit_id for unit_id, unit in UNIT_BY_ID.items()}


class FilterKey(str, Enum):
    """Filter identity; the value doubles as the HTTP query parameter name."""

    RENTAL_LOCATION = "rental-location-id"
    RATE_TYPE = "rate-type-id"
    SEASON_DEFINITION = "season-definition-id"
    SEASON = "season-id"
    UNIT = "unit-id"

    @property
    def param_name(self) -> str:
        return self.value

    @property
    def step(self) -> int:
        return FILTER_STEPS.index(self) + 1

    @property
    def label(self) -> str:
        return FILTER_LABELS[self]


FILTER_STEPS: tuple[FilterKey, ...] = (
    FilterKey.RENTAL_LOCATION,
    FilterKey.RATE_TYPE,
    FilterKey.SEASON_DEFINITION,
    FilterKey.SEASON,
    FilterKey.UNIT,
)

FILTER_LABELS: dict[FilterKey, str] = {
    FilterKey.RENTAL_LOCATION: "Rental Location",
    FilterKey.RATE_TYPE: "Rate Type",
    FilterKey.SEASON_DEFINITION: "Season Definition",
    FilterKey.SEASON: "Season",
    FilterKey.UNIT: "Unit",
}


def filter_for_step(step: int) -> FilterKey:
    if not 1 <= step <= len(FILTER_STEPS):
        raise ValidationError(f"Step must be between 1 and {len(FILTER_STEPS)}, got {step}")
    return FILTER_STEPS[step - 1]


@dataclass(frozen=True)
class RentalLocation:
    id: int
    name: str


@dataclass(frozen=True)
class RateType:
    id: int
    name: str


@dataclass(frozen=True)
class SeasonDefinition:
    id: int
    name: str | None = None


@dataclass(frozen=True)
class Season:
    id: int
    name: str
    season_definition_id: int


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    code: str | None = None


@dataclass(frozen=True)
class PriceDefinition:
    id: int
    season_definition_id: int | None = None


@dataclass(frozen=True)
class Association:
    """One row of the category / rental location / rate type link table."""

    category_id: int | None
    rental_location_id: int
    rate_type_id: int
    price_definition_id: int


@dataclass(frozen=True)
class Price:
    id: int
    price_definition_id: int
    season_id: int | None
    units: int
    time_unit: TimeUnit
    amount: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "time_unit", TimeUnit(self.time_unit))
        try:
            amount = Decimal(str(self.amount))
        except InvalidOperation as exc:
            raise ValueError(f"Price {self.id} has a non-numeric amount: {self.amount!r}") from exc
        object.__setattr__(self, "amount", amount)

        if isinstance(self.units, bool) or not isinstance(self.units, int) or self.units <= 0:
            raise ValueError(f"Price {self.id} units must be a positive integer, got {self.units!r}")
        if amount < 0:
            raise ValueError(f"Price {self.id} amount must be non-negative, got {amount}")


@dataclass(frozen=True)
class PriceEntry:
    id: int
    amount: int
    unit: TimeUnit
    price: Decimal

    @classmethod
    def from_price(cls, price: Price) -> PriceEntry:
        return cls(id=price.id, amount=price.units, unit=price.time_unit, price=price.amount)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "amount": self.amount, "unit": self.unit.value, "price": self.price}


@dataclass(frozen=True)
class VehicleResult:
    """Priced category for one price definition in the requested context."""

    id: int
    name: str
    prices: list[PriceEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "prices": [entry.to_dict() for entry in self.prices],
        }
