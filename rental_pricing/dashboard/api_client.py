# This file implements the HTTP client the operator dashboard uses to reach the catalog API.
# It exists so dashboard code can call one method per endpoint without building URLs or parsing errors.
# Transport failures and server errors become ApiUnavailableError; empty results become ApiNotFoundError.

from __future__ import annotations

from typing import Any

import requests

from rental_pricing.catalog.models import FilterKey


class ApiUnavailableError(RuntimeError):
    """Raised when the API cannot be reached or responds with server errors."""


class ApiNotFoundError(ValueError):
    """Raised when the API reports that a resolution stage found nothing."""


class CatalogApiClient:
    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int = 8,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def get_rental_locations(self) -> list[dict[str, Any]]:
        return self._request_list("/rental-locations", params=None)

    def get_rate_types(self, rental_location_id: int | str) -> list[dict[str, Any]]:
        return self._request_list(
            "/rate-types",
            params={FilterKey.RENTAL_LOCATION.param_name: rental_location_id},
        )

    def get_season_definitions(
        self, rental_location_id: int | str, rate_type_id: int | str
    ) -> list[dict[str, Any]]:
        return self._request_list(
            "/season-definitions",
            params={
                FilterKey.RENTAL_LOCATION.param_name: rental_location_id,
                FilterKey.RATE_TYPE.param_name: rate_type_id,
            },
        )

    def get_seasons(self, season_definition_id: int | str) -> list[dict[str, Any]]:
        return self._request_list(
            "/seasons",
            params={FilterKey.SEASON_DEFINITION.param_name: season_definition_id},
        )

    def get_units(self) -> list[dict[str, Any]]:
        return self._request_list("/units", params=None)

    def get_vehicles(self, filters: dict[FilterKey, str]) -> list[dict[str, Any]]:
        """Query priced vehicles; empty filters are left out of the query string."""

        params = {FilterKey(key).param_name: value for key, value in filters.items() if value}
        return self._request_list("/vehicles", params=params)

    def _request_list(self, path: str, params: dict[str, Any] | None) -> list[dict[str, Any]]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise ApiUnavailableError(f"API request failed for {url}: {exc}") from exc

        if response.status_code == 404:
            raise ApiNotFoundError(self._error_message(response) or f"Endpoint returned 404 for {url}")
        if response.status_code >= 500:
            raise ApiUnavailableError(
                f"API request failed with status {response.status_code} for {url}"
            )
        if response.status_code >= 400:
            message = self._error_message(response)
            raise ValueError(
                message or f"API request was rejected with status {response.status_code} for {url}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiUnavailableError(f"API did not return valid JSON for {url}") from exc

        if not isinstance(payload, list):
            raise ApiUnavailableError(f"Unexpected payload shape from {url}")
        return payload

    @staticmethod
    def _error_message(response: Any) -> str | None:
        try:
            payload = response.json()
        except ValueError:
            return None
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return None
