# This test file validates how the dashboard controller drives the selection wizard.
# A fake API client records calls so the tests can check which lists are loaded after each choice.

from __future__ import annotations

from typing import Any

from rental_pricing.catalog.models import FilterKey
from rental_pricing.dashboard.api_client import ApiNotFoundError, ApiUnavailableError
from rental_pricing.dashboard.wizard_controller import (
    NO_SEASONS_OPTION,
    NO_VEHICLES_MESSAGE,
    PricingWizardController,
)


class FakeCatalogClient:
    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.season_definitions: list[dict[str, Any]] | Exception = [{"id": 1, "name": "Summer"}]
        self.vehicles: list[dict[str, Any]] | Exception = [{"id": 1, "name": "Turismo", "prices": []}]

    def get_rental_locations(self) -> list[dict[str, Any]]:
        self.calls.append(("rental_locations", ()))
        return [{"id": 1, "name": "Barcelona"}, {"id": 2, "name": "Madrid"}]

    def get_units(self) -> list[dict[str, Any]]:
        self.calls.append(("units", ()))
        return [{"id": 1, "name": "Months"}, {"id": 2, "name": "Days"}]

    def get_rate_types(self, rental_location_id: str) -> list[dict[str, Any]]:
        self.calls.append(("rate_types", (rental_location_id,)))
        return [{"id": 1, "name": "Standard"}]

    def get_season_definitions(self, rental_location_id: str, rate_type_id: str) -> list[dict[str, Any]]:
        self.calls.append(("season_definitions", (rental_location_id, rate_type_id)))
        if isinstance(self.season_definitions, Exception):
            raise self.season_definitions
        return list(self.season_definitions)

    def get_seasons(self, season_definition_id: str) -> list[dict[str, Any]]:
        self.calls.append(("seasons", (season_definition_id,)))
        return [{"id": 3, "name": "High"}]

    def get_vehicles(self, filters: dict[FilterKey, str]) -> list[dict[str, Any]]:
        self.calls.append(("vehicles", (dict(filters),)))
        if isinstance(self.vehicles, Exception):
            raise self.vehicles
        return self.vehicles


def _controller() -> tuple[PricingWizardController, FakeCatalogClient]:
    client = FakeCatalogClient()
    controller = PricingWizardController(client)  # type: ignore[arg-type]
    controller.load_initial()
    return controller, client


def test_load_initial_fetches_locations_and_units() -> None:
    controller, client = _controller()

    assert [call[0] for call in client.calls] == ["rental_locations", "units"]
    assert len(controller.options[FilterKey.RENTAL_LOCATION]) == 2
    assert len(controller.options[FilterKey.UNIT]) == 2


def test_selecting_each_step_loads_next_list_and_advances() -> None:
    controller, client = _controller()

    controller.select(FilterKey.RENTAL_LOCATION, "1")
    assert controller.current_step == 2
    controller.select(FilterKey.RATE_TYPE, "1")
    assert controller.current_step == 3
    assert controller.options[FilterKey.SEASON_DEFINITION][-1] == NO_SEASONS_OPTION
    controller.select(FilterKey.SEASON_DEFINITION, "1")
    assert controller.current_step == 4
    controller.select(FilterKey.SEASON, "3")
    assert controller.current_step == 5

    assert ("season_definitions", ("1", "1")) in client.calls
    assert ("seasons", ("1",)) in client.calls


def test_choosing_no_seasons_skips_to_unit_step() -> None:
    controller, client = _controller()
    controller.select(FilterKey.RENTAL_LOCATION, "1")
    controller.select(FilterKey.RATE_TYPE, "1")

    controller.select(FilterKey.SEASON_DEFINITION, "none")

    assert controller.current_step == 5
    assert controller.wizard.get_filter(FilterKey.SEASON) == ""
    assert not any(call[0] == "seasons" for call in client.calls)


def test_season_definitions_404_leaves_only_no_seasons_option() -> None:
    controller, client = _controller()
    client.season_definitions = ApiNotFoundError("No season definitions found.")
    controller.select(FilterKey.RENTAL_LOCATION, "1")

    controller.select(FilterKey.RATE_TYPE, "1")

    assert controller.options[FilterKey.SEASON_DEFINITION] == [NO_SEASONS_OPTION]
    assert controller.current_step == 3
    assert controller.error is None


def test_changing_earlier_choice_drops_dependent_lists() -> None:
    controller, _ = _controller()
    controller.select(FilterKey.RENTAL_LOCATION, "1")
    controller.select(FilterKey.RATE_TYPE, "1")
    controller.select(FilterKey.SEASON_DEFINITION, "1")

    controller.select(FilterKey.RENTAL_LOCATION, "2")

    assert controller.current_step == 2
    assert controller.options[FilterKey.SEASON_DEFINITION] == []
    assert controller.options[FilterKey.SEASON] == []
    assert len(controller.options[FilterKey.UNIT]) == 2
    assert controller.wizard.get_filter(FilterKey.RATE_TYPE) == ""


def test_load_failure_is_reported_without_advancing() -> None:
    controller, client = _controller()
    client.season_definitions = ApiUnavailableError("API down")
    controller.select(FilterKey.RENTAL_LOCATION, "1")

    controller.select(FilterKey.RATE_TYPE, "1")

    assert controller.current_step == 2
    assert controller.error == "API down"


def test_next_step_is_gated_on_satisfaction() -> None:
    controller, _ = _controller()

    assert controller.next_step() is False
    controller.wizard.set_filter(1, "1")
    assert controller.next_step() is True
    assert controller.current_step == 2


def test_back_and_completed_selections() -> None:
    controller, _ = _controller()
    controller.select(FilterKey.RENTAL_LOCATION, "2")
    controller.select(FilterKey.RATE_TYPE, "1")
    controller.select(FilterKey.SEASON_DEFINITION, "none")

    assert controller.completed_selections() == [
        {"label": "Rental Location", "value": "Madrid", "step": 1},
        {"label": "Rate Type", "value": "Standard", "step": 2},
        {"label": "Season Definition", "value": "No seasons", "step": 3},
        {"label": "Season", "value": None, "step": 4},
    ]

    assert controller.back() is True
    assert controller.current_step == 4


def test_search_vehicles_requires_complete_selection() -> None:
    controller, client = _controller()

    result = controller.search_vehicles()

    assert result.vehicles == []
    assert result.message
    assert not any(call[0] == "vehicles" for call in client.calls)


def test_search_vehicles_maps_404_to_no_vehicles_message() -> None:
    controller, client = _controller()
    client.vehicles = ApiNotFoundError("No vehicles found for your conditions.")
    controller.select(FilterKey.RENTAL_LOCATION, "1")
    controller.select(FilterKey.RATE_TYPE, "1")
    controller.select(FilterKey.SEASON_DEFINITION, "none")
    controller.select(FilterKey.UNIT, "2")

    result = controller.search_vehicles()

    assert result.vehicles == []
    assert result.message == NO_VEHICLES_MESSAGE


def test_search_vehicles_returns_rows() -> None:
    controller, client = _controller()
    controller.select(FilterKey.RENTAL_LOCATION, "1")
    controller.select(FilterKey.RATE_TYPE, "1")
    controller.select(FilterKey.SEASON_DEFINITION, "none")
    controller.select(FilterKey.UNIT, "2")

    result = controller.search_vehicles()

    assert [vehicle["name"] for vehicle in result.vehicles] == ["Turismo"]
    _, (filters,) = client.calls[-1]
    assert filters[FilterKey.SEASON_DEFINITION] == "none"


def test_reset_reloads_initial_lists() -> None:
    controller, client = _controller()
    controller.select(FilterKey.RENTAL_LOCATION, "1")

    controller.reset()

    assert controller.current_step == 1
    assert controller.options[FilterKey.RATE_TYPE] == []
    assert [call[0] for call in client.calls[-2:]] == ["rental_locations", "units"]
