# This file tests the shared filter parameter rules used by the HTTP layer and the resolver.

from __future__ import annotations

import pytest

from rental_pricing.catalog.errors import ValidationError
from rental_pricing.catalog.models import NO_SEASON_DEFINITION, TimeUnit
from rental_pricing.catalog.params import (
    parse_optional_id,
    parse_positive_int,
    parse_season_definition_id,
    parse_unit,
    parse_vehicle_filters,
    require_params,
)


def test_require_params_lists_every_missing_name() -> None:
    with pytest.raises(ValidationError, match=r"^Missing required parameters: rate-type-id, unit-id$"):
        require_params(
            {"rental-location-id": "1", "rate-type-id": "", "unit-id": None},
            "rental-location-id",
            "rate-type-id",
            "unit-id",
        )


@pytest.mark.parametrize("raw", ["0", "-1", "abc", "1.5", "", " "])
def test_parse_positive_int_rejects_invalid_values(raw: str) -> None:
    with pytest.raises(ValidationError, match="Invalid integer parameters: rental-location-id"):
        parse_positive_int("rental-location-id", raw)


def test_parse_positive_int_accepts_padded_digits() -> None:
    assert parse_positive_int("rate-type-id", " 42 ") == 42


def test_parse_optional_id_treats_blank_as_absent() -> None:
    assert parse_optional_id("season-id", None) is None
    assert parse_optional_id("season-id", "") is None
    assert parse_optional_id("season-id", "3") == 3


def test_parse_season_definition_id_accepts_sentinel() -> None:
    assert parse_season_definition_id(None) is None
    assert parse_season_definition_id("none") == NO_SEASON_DEFINITION
    assert parse_season_definition_id("5") == 5
    with pytest.raises(ValidationError):
        parse_season_definition_id("summer")


@pytest.mark.parametrize("raw", ["NONE", "None", "nOnE"])
def test_parse_season_definition_id_sentinel_is_case_sensitive(raw: str) -> None:
    with pytest.raises(ValidationError, match=r"^Invalid integer parameters: season-definition-id$"):
        parse_season_definition_id(raw)


def test_parse_unit_maps_ids_and_rejects_out_of_range() -> None:
    assert parse_unit("1") is TimeUnit.MONTHS
    assert parse_unit("4") is TimeUnit.MINUTES
    with pytest.raises(ValidationError, match="Unit ID must be between 1 and 4"):
        parse_unit("9")


def test_parse_vehicle_filters_reports_all_invalid_integers() -> None:
    with pytest.raises(ValidationError, match=r"^Invalid integer parameters: rental-location-id, unit-id$"):
        parse_vehicle_filters({"rental-location-id": "x", "rate-type-id": "2", "unit-id": "0"})


def test_parse_vehicle_filters_builds_resolver_arguments() -> None:
    filters = parse_vehicle_filters(
        {
            "rental-location-id": "1",
            "rate-type-id": "2",
            "unit-id": "2",
            "season-definition-id": "none",
            "season-id": "",
        }
    )

    assert filters == {
        "rental_location_id": 1,
        "rate_type_id": 2,
        "unit_id": 2,
        "season_definition_id": NO_SEASON_DEFINITION,
        "season_id": None,
    }


def test_parse_vehicle_filters_reports_unit_range_after_integer_checks() -> None:
    with pytest.raises(ValidationError, match="Unit ID must be between 1 and 4"):
        parse_vehicle_filters({"rental-location-id": " 1 ", "rate-type-id": "2", "unit-id": "9"})
