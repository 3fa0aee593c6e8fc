# This module validates raw filter parameters before they reach the resolver.
# It exists so the HTTP layer and wizard snapshots share one set of parsing rules and messages.
# Identifiers must be positive integers; the season definition also accepts the "none" sentinel.

from __future__ import annotations

import re
from collections.abc import Mapping

from rental_pricing.catalog.errors import ValidationError
from rental_pricing.catalog.models import NO_SEASON_DEFINITION, FilterKey, TimeUnit

_DIGITS_RE = re.compile(r"^\d+$")


def _is_blank(value: object) -> bool:
    return value is None or str(value).strip() == ""


def require_params(params: Mapping[str, object], *names: str) -> None:
    """Raise one ValidationError listing every missing parameter."""

    missing = [name for name in names if _is_blank(params.get(name))]
    if missing:
        raise ValidationError(f"Missing required parameters: {', '.join(missing)}")


def parse_positive_int(name: str, value: object) -> int:
    raw = str(value).strip()
    if not _DIGITS_RE.match(raw) or int(raw) <= 0:
        raise ValidationError(f"Invalid integer parameters: {name}", field=name)
    return int(raw)


def parse_optional_id(name: str, value: object) -> int | None:
    if _is_blank(value):
        return None
    return parse_positive_int(name, value)


def parse_season_definition_id(value: object) -> int | str | None:
    """Return None when absent, the sentinel when "none", otherwise a positive id."""

    if _is_blank(value):
        return None
    raw = str(value).strip()
    if raw == NO_SEASON_DEFINITION:
        return NO_SEASON_DEFINITION
    return parse_positive_int(FilterKey.SEASON_DEFINITION.param_name, raw)


def parse_unit(value: object) -> TimeUnit:
    name = FilterKey.UNIT.param_name
    return TimeUnit.from_unit_id(parse_positive_int(name, value))


def parse_vehicle_filters(params: Mapping[str, object]) -> dict[str, object]:
    """Validate the vehicle query parameters and return resolver keyword arguments."""

    location = FilterKey.RENTAL_LOCATION.param_name
    rate_type = FilterKey.RATE_TYPE.param_name
    unit = FilterKey.UNIT.param_name
    require_params(params, location, rate_type, unit)

    ids: dict[str, int] = {}
    invalid = []
    for name in (location, rate_type, unit):
        try:
            ids[name] = parse_positive_int(name, params[name])
        except ValidationError:
            invalid.append(name)
    if invalid:
        raise ValidationError(f"Invalid integer parameters: {', '.join(invalid)}")

    return {
        "rental_location_id": ids[location],
        "rate_type_id": ids[rate_type],
        "unit_id": parse_unit(ids[unit]).unit_id,
        "season_definition_id": parse_season_definition_id(
            params.get(FilterKey.SEASON_DEFINITION.param_name)
        ),
        "season_id": parse_optional_id(
            FilterKey.SEASON.param_name, params.get(FilterKey.SEASON.param_name)
        ),
    }
