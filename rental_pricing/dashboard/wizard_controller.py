# This file drives the selection wizard from the operator dashboard.
# It exists so the Streamlit page only renders state while this class decides what to load and when to move.
# A list that finishes loading advances the wizard only if the wizard is still on the step that asked for it.
# Choosing "no seasons" as the season definition goes straight to the unit step.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from rental_pricing.catalog.models import FILTER_STEPS, NO_SEASON_DEFINITION, FilterKey
from rental_pricing.catalog.wizard import UNIT_STEP, SelectionWizard
from rental_pricing.dashboard.api_client import ApiNotFoundError, ApiUnavailableError, CatalogApiClient

LOGGER = logging.getLogger("dashboard")

NO_SEASONS_LABEL = "No seasons"
NO_SEASONS_OPTION: dict[str, Any] = {"id": NO_SEASON_DEFINITION, "name": NO_SEASONS_LABEL}
NO_VEHICLES_MESSAGE = "No vehicles found for the selected conditions."

# option lists loaded once per session rather than per selection
_STATIC_OPTIONS = (FilterKey.RENTAL_LOCATION, FilterKey.UNIT)


@dataclass(frozen=True)
class VehicleSearchResult:
    vehicles: list[dict[str, Any]] = field(default_factory=list)
    message: str | None = None


class PricingWizardController:
    def __init__(self, client: CatalogApiClient, wizard: SelectionWizard | None = None) -> None:
        self.client = client
        self.wizard = wizard or SelectionWizard()
        self.options: dict[FilterKey, list[dict[str, Any]]] = {key: [] for key in FILTER_STEPS}
        self.error: str | None = None

    @property
    def current_step(self) -> int:
        return self.wizard.current_step

    def load_initial(self) -> None:
        self.error = None
        try:
            self.options[FilterKey.RENTAL_LOCATION] = self.client.get_rental_locations()
            self.options[FilterKey.UNIT] = self.client.get_units()
        except (ApiUnavailableError, ValueError) as exc:
            LOGGER.warning("Initial catalog load failed: %s", exc)
            self.error = str(exc)

    def select(self, key: FilterKey, value: str | None) -> None:
        """Apply a selection, drop the lists it invalidates, and load the next list."""

        key = FilterKey(key)
        step = key.step
        cleared = self.wizard.set_filter(step, value)
        for cleared_key in cleared:
            if cleared_key not in _STATIC_OPTIONS:
                self.options[cleared_key] = []
        self.error = None

        selected = self.wizard.get_filter(key)
        if not selected:
            return

        try:
            if key is FilterKey.RENTAL_LOCATION:
                self.options[FilterKey.RATE_TYPE] = self.client.get_rate_types(selected)
                self._advance_if(step)
            elif key is FilterKey.RATE_TYPE:
                self.options[FilterKey.SEASON_DEFINITION] = self._load_season_definitions(selected)
                self._advance_if(step)
            elif key is FilterKey.SEASON_DEFINITION:
                if selected == NO_SEASON_DEFINITION:
                    self.wizard.skip_seasons()
                else:
                    self.options[FilterKey.SEASON] = self.client.get_seasons(selected)
                    self._advance_if(step)
            elif key is FilterKey.SEASON:
                if self.wizard.current_step == step:
                    self.wizard.jump_to(UNIT_STEP)
        except (ApiUnavailableError, ValueError) as exc:
            LOGGER.warning("Loading options after %s failed: %s", key.param_name, exc)
            self.error = str(exc)

    def next_step(self) -> bool:
        current = self.wizard.current_step
        if not self.wizard.is_step_satisfied(current):
            return False
        if current == FilterKey.SEASON_DEFINITION.step:
            if self.wizard.get_filter(FilterKey.SEASON_DEFINITION) == NO_SEASON_DEFINITION:
                return self.wizard.skip_seasons()
        return self.wizard.advance()

    def back(self) -> bool:
        return self.wizard.retreat()

    def reset(self) -> None:
        self.wizard.reset()
        self.options = {key: [] for key in FILTER_STEPS}
        self.load_initial()

    def completed_selections(self) -> list[dict[str, Any]]:
        selections = []
        for key in FILTER_STEPS:
            if key.step >= self.wizard.current_step:
                break
            selections.append(
                {"label": key.label, "value": self._selected_name(key), "step": key.step}
            )
        return selections

    def search_vehicles(self) -> VehicleSearchResult:
        if not self.wizard.is_ready_for_submission():
            return VehicleSearchResult(message="Select a rental location, a rate type and a unit first.")
        try:
            vehicles = self.client.get_vehicles(self.wizard.snapshot())
        except ApiNotFoundError:
            return VehicleSearchResult(message=NO_VEHICLES_MESSAGE)
        except (ApiUnavailableError, ValueError) as exc:
            LOGGER.warning("Vehicle search failed: %s", exc)
            self.error = str(exc)
            return VehicleSearchResult(message=str(exc))
        return VehicleSearchResult(vehicles=vehicles)

    def _load_season_definitions(self, rate_type_id: str) -> list[dict[str, Any]]:
        location_id = self.wizard.get_filter(FilterKey.RENTAL_LOCATION)
        try:
            definitions = self.client.get_season_definitions(location_id, rate_type_id)
        except ApiNotFoundError:
            definitions = []
        return [*definitions, dict(NO_SEASONS_OPTION)]

    def _advance_if(self, expected_step: int) -> None:
        if self.wizard.current_step == expected_step:
            self.wizard.advance()

    def _selected_name(self, key: FilterKey) -> str | None:
        selected = self.wizard.get_filter(key)
        if not selected:
            return None
        for option in self.options[key]:
            if str(option.get("id")) == selected:
                return option.get("name") or selected
        return selected
