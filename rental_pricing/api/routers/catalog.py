# This file defines the catalog endpoints under the versioned API path.
# It exists so the operator dashboard can fetch each dependent list and the final price grid.
# Query parameters arrive as raw strings and are validated by the shared catalog parameter rules.
# Resolution errors propagate to the registered handlers, which map them to 400, 404, or 500.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from rental_pricing.api.dependencies import get_catalog_resolver
from rental_pricing.api.schemas.catalog_schemas import NamedItemV1, VehicleV1
from rental_pricing.catalog.models import FilterKey, VehicleResult
from rental_pricing.catalog.params import parse_positive_int, parse_vehicle_filters, require_params
from rental_pricing.catalog.resolver import CatalogResolver

router = APIRouter(tags=["catalog"])
ResolverDep = Annotated[CatalogResolver, Depends(get_catalog_resolver)]

LOCATION_PARAM = FilterKey.RENTAL_LOCATION.param_name
RATE_TYPE_PARAM = FilterKey.RATE_TYPE.param_name
SEASON_DEFINITION_PARAM = FilterKey.SEASON_DEFINITION.param_name
SEASON_PARAM = FilterKey.SEASON.param_name
UNIT_PARAM = FilterKey.UNIT.param_name


def _vehicle_payload(vehicle: VehicleResult) -> dict[str, object]:
    return {
        "id": vehicle.id,
        "name": vehicle.name,
        "prices": [
            {
                "id": entry.id,
                "amount": entry.amount,
                "unit": entry.unit.value,
                "price": float(entry.price),
            }
            for entry in vehicle.prices
        ],
    }


@router.get("/rental-locations", response_model=list[NamedItemV1])
def rental_locations(resolver: ResolverDep) -> list[dict[str, object]]:
    return [{"id": item.id, "name": item.name} for item in resolver.list_rental_locations()]


@router.get("/rate-types", response_model=list[NamedItemV1])
def rate_types(
    resolver: ResolverDep,
    rental_location_id: str | None = Query(default=None, alias=LOCATION_PARAM),
) -> list[dict[str, object]]:
    require_params({LOCATION_PARAM: rental_location_id}, LOCATION_PARAM)
    location_id = parse_positive_int(LOCATION_PARAM, rental_location_id)
    return [{"id": item.id, "name": item.name} for item in resolver.list_rate_types(location_id)]


@router.get("/season-definitions", response_model=list[NamedItemV1])
def season_definitions(
    resolver: ResolverDep,
    rental_location_id: str | None = Query(default=None, alias=LOCATION_PARAM),
    rate_type_id: str | None = Query(default=None, alias=RATE_TYPE_PARAM),
) -> list[dict[str, object]]:
    params = {LOCATION_PARAM: rental_location_id, RATE_TYPE_PARAM: rate_type_id}
    require_params(params, LOCATION_PARAM, RATE_TYPE_PARAM)
    items = resolver.list_season_definitions(
        parse_positive_int(LOCATION_PARAM, rental_location_id),
        parse_positive_int(RATE_TYPE_PARAM, rate_type_id),
    )
    return [{"id": item.id, "name": item.name} for item in items]


@router.get("/seasons", response_model=list[NamedItemV1])
def seasons(
    resolver: ResolverDep,
    season_definition_id: str | None = Query(default=None, alias=SEASON_DEFINITION_PARAM),
) -> list[dict[str, object]]:
    require_params({SEASON_DEFINITION_PARAM: season_definition_id}, SEASON_DEFINITION_PARAM)
    definition_id = parse_positive_int(SEASON_DEFINITION_PARAM, season_definition_id)
    return [{"id": item.id, "name": item.name} for item in resolver.list_seasons(definition_id)]


@router.get("/units", response_model=list[NamedItemV1])
def units(resolver: ResolverDep) -> list[dict[str, object]]:
    return [{"id": unit.unit_id, "name": unit.display_name} for unit in resolver.list_units()]


@router.get("/vehicles", response_model=list[VehicleV1])
def vehicles(
    resolver: ResolverDep,
    rental_location_id: str | None = Query(default=None, alias=LOCATION_PARAM),
    rate_type_id: str | None = Query(default=None, alias=RATE_TYPE_PARAM),
    unit_id: str | None = Query(default=None, alias=UNIT_PARAM),
    season_definition_id: str | None = Query(default=None, alias=SEASON_DEFINITION_PARAM),
    season_id: str | None = Query(default=None, alias=SEASON_PARAM),
) -> list[dict[str, object]]:
    filters = parse_vehicle_filters(
        {
            LOCATION_PARAM: rental_location_id,
            RATE_TYPE_PARAM: rate_type_id,
            UNIT_PARAM: unit_id,
            SEASON_DEFINITION_PARAM: season_definition_id,
            SEASON_PARAM: season_id,
        }
    )
    return [_vehicle_payload(vehicle) for vehicle in resolver.resolve_vehicles(**filters)]
