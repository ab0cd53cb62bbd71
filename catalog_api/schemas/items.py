"""Schemas for the items endpoints (/api/items)."""

import math

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from catalog_api.models import NewItem, Record


class Pagination(BaseModel):
    """Paging metadata, derived on every request."""

    current_page: int = Field(alias="currentPage", ge=1)
    total_items: int = Field(alias="totalItems", ge=0)
    total_pages: int = Field(alias="totalPages", ge=0)
    items_per_page: int = Field(alias="itemsPerPage", ge=1)
    has_next_page: bool = Field(alias="hasNextPage")
    has_prev_page: bool = Field(alias="hasPrevPage")

    model_config = {"populate_by_name": True}


class ItemsResponse(BaseModel):
    """Response payload for GET /api/items."""

    items: list[Record]
    pagination: Pagination


class CreateItemRequest(BaseModel):
    """Request body for POST /api/items.

    Fields default to None (validated anyway) so a missing field gets the same
    message as a malformed one:
    - name, category: strings, non-empty after trimming (stored trimmed)
    - price: JSON number (not bool), finite as a float, >= 0
    """

    name: str = Field(default=None, validate_default=True, examples=["Desk Lamp"])
    category: str = Field(default=None, validate_default=True, examples=["Lighting"])
    price: float | int = Field(default=None, validate_default=True, examples=[35])

    @field_validator("name", "category", mode="before")
    @classmethod
    def _non_empty_text(cls, v: object, info: ValidationInfo) -> str:
        if not isinstance(v, str) or not v.strip():
            raise PydanticCustomError(
                "required_text",
                "{field} is required and must be a non-empty string",
                {"field": info.field_name.capitalize()},
            )
        return v.strip()

    @field_validator("price", mode="before")
    @classmethod
    def _non_negative_number(cls, v: object) -> float | int:
        error = PydanticCustomError("price", "Price is required and must be a non-negative number")
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise error
        try:
            as_float = float(v)
        except OverflowError:
            # JSON integer beyond float range
            raise error from None
        if not math.isfinite(as_float) or as_float < 0:
            raise error
        return v

    def to_new_item(self) -> NewItem:
        return NewItem(name=self.name, category=self.category, price=self.price)
