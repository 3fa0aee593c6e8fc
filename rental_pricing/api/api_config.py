# This file defines runtime settings for the API layer in one place.
# It exists so endpoint behavior, versioning, and catalog table names can be configured without code edits.
# The config loader reads environment variables and applies safe defaults for local development.
# It also validates table names and version paths to prevent unsafe SQL identifier usage.

from __future__ import annotations

import os
import re
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# field name -> (environment variable, default table name)
TABLE_SETTINGS: dict[str, tuple[str, str]] = {
    "rental_location_table_name": ("API_RENTAL_LOCATION_TABLE_NAME", "rental_locations"),
    "rate_type_table_name": ("API_RATE_TYPE_TABLE_NAME", "rate_types"),
    "season_definition_table_name": ("API_SEASON_DEFINITION_TABLE_NAME", "season_definitions"),
    "season_table_name": ("API_SEASON_TABLE_NAME", "seasons"),
    "category_table_name": ("API_CATEGORY_TABLE_NAME", "categories"),
    "price_definition_table_name": ("API_PRICE_DEFINITION_TABLE_NAME", "price_definitions"),
    "association_table_name": (
        "API_ASSOCIATION_TABLE_NAME",
        "category_rental_location_rate_types",
    ),
    "price_table_name": ("API_PRICE_TABLE_NAME", "prices"),
    "request_log_table_name": ("API_REQUEST_LOG_TABLE_NAME", "api_request_log"),
}


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Rental Pricing Catalog API"
    api_version_path: str = "/api/v1"
    schema_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    environment: str = "local"
    database_url: str
    enable_request_logging: bool = False
    allowed_origins: list[str] = Field(default_factory=list)
    rental_location_table_name: str = "rental_locations"
    rate_type_table_name: str = "rate_types"
    season_definition_table_name: str = "season_definitions"
    season_table_name: str = "seasons"
    category_table_name: str = "categories"
    price_definition_table_name: str = "price_definitions"
    association_table_name: str = "category_rental_location_rate_types"
    price_table_name: str = "prices"
    request_log_table_name: str = "api_request_log"
    app_version: str = "0.1.0"
    allowed_table_names: set[str] = Field(default_factory=set)

    @field_validator("api_version_path")
    @classmethod
    def validate_api_version_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("api_version_path must start with '/'.")
        parts = [part for part in value.split("/") if part]
        if len(parts) < 2 or parts[-1].startswith("v") is False:
            raise ValueError("api_version_path must look like '/api/v1'.")
        return value.rstrip("/")

    @field_validator(*TABLE_SETTINGS)
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"Unsafe SQL identifier: {value!r}")
        return value

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value

    def api_version_label(self) -> str:
        return self.api_version_path.rstrip("/").split("/")[-1]

    def catalog_table_names(self) -> list[str]:
        return [getattr(self, field) for field in TABLE_SETTINGS if field != "request_log_table_name"]

    def validate_table_name(self, table_name: str) -> str:
        if not _IDENTIFIER_RE.match(table_name):
            raise ValueError(f"Unsafe SQL identifier: {table_name!r}")
        if table_name not in self.allowed_table_names:
            raise ValueError(f"Table name is not in allowlist: {table_name!r}")
        return table_name


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be boolean-like, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def build_allowed_table_names(config_values: dict[str, object]) -> set[str]:
    configured_names = {str(config_values.get(field, default)) for field, (_, default) in TABLE_SETTINGS.items()}
    configured_names.update(default for _, default in TABLE_SETTINGS.values())
    configured_names.update(_env_list("API_ALLOWED_TABLE_NAMES", []))
    for table_name in configured_names:
        if not _IDENTIFIER_RE.match(table_name):
            raise ValueError(f"Unsafe SQL identifier in allowlist: {table_name!r}")
    return configured_names


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Rental Pricing Catalog API"),
        "api_version_path": os.getenv("API_VERSION_PATH", "/api/v1"),
        "schema_version": os.getenv("API_SCHEMA_VERSION", "1.0.0"),
        "host": os.getenv("API_HOST", "0.0.0.0"),
        "port": _env_int("API_PORT", 8000),
        "environment": os.getenv("ENV", "local"),
        "database_url": os.getenv("DATABASE_URL", ""),
        "enable_request_logging": _env_bool("API_ENABLE_REQUEST_LOGGING", False),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", []),
        "app_version": os.getenv("APP_VERSION", "0.1.0"),
    }
    for field, (env_name, default) in TABLE_SETTINGS.items():
        config_values[field] = os.getenv(env_name, default)

    if not config_values["database_url"]:
        raise RuntimeError("DATABASE_URL is required for API startup.")

    config_values["allowed_table_names"] = build_allowed_table_names(config_values)

    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
