# This file builds the FastAPI application and registers all API routers.
# It exists so startup behavior, middleware, and error handling are configured in one place.
# The app adds request IDs, timing headers, and optional request logging for operations visibility.

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import RequestResponseEndpoint

from rental_pricing.api.api_config import get_api_config
from rental_pricing.api.dependencies import get_database_client
from rental_pricing.api.error_handlers import register_error_handlers
from rental_pricing.api.routers.catalog import router as catalog_router
from rental_pricing.api.routers.health import router as health_router
from rental_pricing.common.logging import configure_logging

LOGGER = logging.getLogger("api")

CATALOG_HTTP_REQUESTS_TOTAL = Counter(
    "catalog_http_requests_total",
    "Total number of HTTP requests processed by the catalog API.",
    ["method", "path", "status_code"],
)
CATALOG_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "catalog_http_request_duration_seconds",
    "Catalog API request duration in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
CATALOG_HTTP_INFLIGHT_REQUESTS = Gauge(
    "catalog_http_inflight_requests",
    "Number of catalog API requests currently being processed.",
    ["method", "path"],
)


def create_app() -> FastAPI:
    """Create configured FastAPI application instance."""

    configure_logging()
    config = get_api_config()

    app = FastAPI(
        title=config.api_name,
        description=(
            "Versioned API for the rental pricing catalog. Each list endpoint narrows the catalog "
            "by one more filter; the vehicles endpoint returns the price grid per vehicle category."
        ),
        version=config.app_version,
        openapi_tags=[
            {"name": "health", "description": "Service liveness, readiness, and version metadata."},
            {
                "name": "catalog",
                "description": "Rental locations, rate types, seasons, units, and priced vehicles.",
            },
        ],
    )

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        method_label = request.method
        path_label = request.url.path
        started = time.perf_counter()
        status_code = 500
        CATALOG_HTTP_INFLIGHT_REQUESTS.labels(method=method_label, path=path_label).inc()
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0

            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"

            if config.enable_request_logging:
                try:
                    db = get_database_client()
                    db.log_request(
                        table_name=config.request_log_table_name,
                        request_id=request_id,
                        path=request.url.path,
                        method=request.method,
                        status_code=response.status_code,
                        duration_ms=duration_ms,
                    )
                except (SQLAlchemyError, ValueError) as exc:
                    LOGGER.warning("Request audit write failed for %s: %s", request_id, exc)

            return response
        finally:
            duration_s = time.perf_counter() - started
            CATALOG_HTTP_REQUESTS_TOTAL.labels(
                method=method_label,
                path=path_label,
                status_code=str(status_code),
            ).inc()
            CATALOG_HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method_label,
                path=path_label,
            ).observe(duration_s)
            CATALOG_HTTP_INFLIGHT_REQUESTS.labels(method=method_label, path=path_label).dec()

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.on_event("startup")
    def startup_checks() -> None:
        db = get_database_client()
        app.state.db_connected_at_startup = db.can_connect()
        if not app.state.db_connected_at_startup:
            LOGGER.warning("Catalog database is not reachable at startup")

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(catalog_router, prefix=config.api_version_path)

    return app


app = create_app()
