"""Pydantic schemas for API request/response validation."""

from catalog_api.schemas.common import ErrorDetail, ErrorResponse
from catalog_api.schemas.items import CreateItemRequest, ItemsResponse, Pagination
from catalog_api.schemas.stats import CategoryStats, PriceRange, Statistics

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "CreateItemRequest",
    "ItemsResponse",
    "Pagination",
    "CategoryStats",
    "PriceRange",
    "Statistics",
]
