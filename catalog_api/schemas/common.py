"""Error body returned by every failing catalog endpoint."""

from typing import Any

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """What went wrong: a machine code (``NOT_FOUND``, ``VALIDATION_ERROR``,
    ``STORAGE_READ_ERROR``...) plus the message shown to the user."""

    code: str
    message: str
    detail: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """``{"error": {"code", "message", "detail"}}``, built from CatalogError subclasses."""

    error: ErrorDetail
