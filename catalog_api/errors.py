"""Typed failures raised by the catalog core.

Stores and services raise these; only the HTTP layer (see ``main.py``) turns
them into status codes and the structured error body.
"""

from typing import Any


class CatalogError(RuntimeError):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(CatalogError):
    """Bad input shape or range (user-correctable)."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(CatalogError):
    status_code = 404
    code = "NOT_FOUND"


class StorageReadError(CatalogError):
    """The data file could not be stat'ed, read or parsed."""

    code = "STORAGE_READ_ERROR"


class StorageWriteError(CatalogError):
    """The data file could not be persisted."""

    code = "STORAGE_WRITE_ERROR"
