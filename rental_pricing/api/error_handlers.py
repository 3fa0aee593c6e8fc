# This file defines consistent API error payloads and exception handlers.
# It exists so every endpoint returns the same error shape with request trace fields.
# Catalog validation maps to 400, empty resolution stages to 404, and storage failures to 500.
# Unexpected exceptions are logged with traceback and answered with a generic message.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rental_pricing.catalog.errors import CatalogError, DatabaseError, NotFoundError, ValidationError

LOGGER = logging.getLogger("api")

STATUS_BY_ERROR: dict[type[CatalogError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    DatabaseError: 500,
}


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def _error_body(
    *, request: Request, error_code: str, message: str, details: Any | None = None
) -> dict[str, Any]:
    return {
        "error_code": error_code,
        "message": message,
        "details": details,
        "request_id": _request_id(request),
        "timestamp": datetime.now(tz=UTC).isoformat(),
    }


def status_for(exc: CatalogError) -> int:
    for error_type, status_code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


def _details_for(exc: CatalogError) -> dict[str, Any] | None:
    if isinstance(exc, NotFoundError):
        return {"resource": exc.resource, "context": exc.context}
    if isinstance(exc, ValidationError) and exc.field:
        return {"field": exc.field}
    return None


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        status_code = status_for(exc)
        if status_code >= 500:
            LOGGER.error("%s %s failed: %s", request.method, request.url.path, exc.message)
            message = exc.message if isinstance(exc, DatabaseError) else "The server encountered an unexpected error."
        else:
            LOGGER.info("%s %s -> %d %s", request.method, request.url.path, status_code, exc.message)
            message = exc.message
        return JSONResponse(
            status_code=status_code,
            content=_error_body(
                request=request,
                error_code=exc.error_code,
                message=message,
                details=_details_for(exc),
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        LOGGER.info("%s %s -> 400 request validation failed", request.method, request.url.path)
        return JSONResponse(
            status_code=400,
            content=_error_body(
                request=request,
                error_code="VALIDATION_ERROR",
                message="Invalid request parameters.",
                details=jsonable_encoder(exc.errors()),
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                error_code="HTTP_ERROR",
                message=str(exc.detail),
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request=request,
                error_code="INTERNAL_SERVER_ERROR",
                message="The server encountered an unexpected error.",
            ),
        )
