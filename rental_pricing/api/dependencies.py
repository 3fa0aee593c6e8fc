# This file provides dependency factories for FastAPI routes and middleware.
# It exists so the database client and catalog resolver are created once and shared through injection.
# Endpoint tests override these factories instead of patching modules.

from __future__ import annotations

from functools import lru_cache

from rental_pricing.api.api_config import ApiConfig, get_api_config
from rental_pricing.api.db_access import DatabaseClient
from rental_pricing.catalog.resolver import CatalogResolver
from rental_pricing.catalog.sql_source import SqlCatalogSource


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    config = get_api_config()
    return DatabaseClient(database_url=config.database_url)


@lru_cache(maxsize=1)
def get_catalog_source() -> SqlCatalogSource:
    config = get_api_config()
    db_client = get_database_client()
    return SqlCatalogSource(config=config, db=db_client)


@lru_cache(maxsize=1)
def get_catalog_resolver() -> CatalogResolver:
    return CatalogResolver(source=get_catalog_source())


def get_config() -> ApiConfig:
    return get_api_config()
