# This file defines liveness, readiness, and version endpoints for API operations.
# It exists so orchestration and monitoring systems can verify service health quickly.
# The readiness check confirms database connectivity and that every catalog table exists.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import SQLAlchemyError

from rental_pricing.api.api_config import ApiConfig
from rental_pricing.api.db_access import DatabaseClient
from rental_pricing.api.dependencies import get_config, get_database_client
from rental_pricing.api.schemas.health_schemas import HealthResponse, ReadinessResponse, VersionResponse

router = APIRouter(tags=["health"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]
DBDep = Annotated[DatabaseClient, Depends(get_database_client)]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _version_fields(config: ApiConfig) -> dict[str, str]:
    return {
        "api_version": config.api_version_label(),
        "schema_version": config.schema_version,
    }


def _missing_tables(config: ApiConfig, db: DatabaseClient) -> list[str]:
    missing: list[str] = []
    for table_name in config.catalog_table_names():
        try:
            exists = db.table_exists(table_name)
        except SQLAlchemyError:
            exists = False
        if not exists:
            missing.append(table_name)
    return missing


@router.get("/health", response_model=HealthResponse)
def health(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        **_version_fields(config),
        "request_id": request.state.request_id,
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
        "timestamp": _utc_now(),
    }


@router.get("/ready", response_model=ReadinessResponse)
def ready(
    request: Request,
    config: ConfigDep,
    db: DBDep,
) -> dict[str, object]:
    db_connected = db.can_connect()
    missing_tables = _missing_tables(config, db) if db_connected else config.catalog_table_names()
    catalog_tables_ready = db_connected and not missing_tables

    return {
        **_version_fields(config),
        "request_id": request.state.request_id,
        "db_connected": db_connected,
        "catalog_tables_ready": catalog_tables_ready,
        "missing_tables": missing_tables,
        "ready": catalog_tables_ready,
        "database": "reachable" if db_connected else "unreachable",
        "timestamp": _utc_now(),
    }


@router.get("/version", response_model=VersionResponse)
def version(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        **_version_fields(config),
        "request_id": request.state.request_id,
        "api_version_path": config.api_version_path,
        "app_version": config.app_version,
        "project": config.api_name,
        "version": config.app_version,
        "timestamp": _utc_now(),
    }
