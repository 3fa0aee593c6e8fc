# This file provides shared helpers for API endpoint tests.
# It exists so tests can override the resolver and database dependencies without touching real databases.
# The helpers build consistent config objects and scoped TestClient contexts.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi.testclient import TestClient

from rental_pricing.api.api_config import ApiConfig
from rental_pricing.api.app import app
from rental_pricing.api.dependencies import get_catalog_resolver, get_config, get_database_client
from tests.catalog.support import CATALOG_TABLES


def build_test_config(*, enable_request_logging: bool = False) -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Catalog API",
        api_version_path="/api/v1",
        schema_version="1.0.0",
        host="0.0.0.0",
        port=8000,
        environment="test",
        database_url="sqlite+pysqlite:///:memory:",
        enable_request_logging=enable_request_logging,
        allowed_origins=[],
        app_version="0.1.0",
        allowed_table_names=set(CATALOG_TABLES),
    )


class FakeDBClient:
    """Simple fake DB dependency for health/readiness endpoint tests."""

    def __init__(self, *, connected: bool = True, existing_tables: set[str] | None = None) -> None:
        self._connected = connected
        self._tables = set(CATALOG_TABLES) if existing_tables is None else existing_tables
        self.logged_requests: list[dict[str, Any]] = []

    def can_connect(self) -> bool:
        return self._connected

    def table_exists(self, table_name: str) -> bool:
        return self._connected and table_name in self._tables

    def log_request(self, **kwargs: Any) -> None:
        self.logged_requests.append(kwargs)


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    db_client: Any | None = None,
    resolver: Any | None = None,
    raise_server_exceptions: bool = True,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()

    app.dependency_overrides[get_config] = lambda: resolved_config
    if db_client is not None:
        app.dependency_overrides[get_database_client] = lambda: db_client
    if resolver is not None:
        app.dependency_overrides[get_catalog_resolver] = lambda: resolver

    try:
        with TestClient(app, raise_server_exceptions=raise_server_exceptions) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
