# This module defines the error taxonomy shared by the wizard, the resolver, and the API layer.
# Validation and not-found outcomes are expected and user-facing; database errors are not.
# Each error carries a stable machine code so the HTTP layer can map it without string matching.

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog engine errors."""

    error_code = "CATALOG_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(CatalogError):
    """Raised for missing or malformed input and illegal wizard moves."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class NotFoundError(CatalogError):
    """Raised when a resolution stage produces an empty result."""

    error_code = "NOT_FOUND"

    def __init__(self, resource: str, context: str | None = None) -> None:
        self.resource = resource
        self.context = context
        if context:
            message = f"No {resource} found for {context}."
        else:
            message = f"No {resource} found."
        super().__init__(message)


class DatabaseError(CatalogError):
    """Raised when the underlying catalog storage call fails."""

    error_code = "DATABASE_ERROR"
