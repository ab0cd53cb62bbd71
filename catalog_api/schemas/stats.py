"""Schemas for the statistics endpoint (/api/stats)."""

from pydantic import BaseModel, Field


class CategoryStats(BaseModel):
    count: int = Field(ge=1)
    average_price: float | int = Field(alias="averagePrice")

    model_config = {"populate_by_name": True, "frozen": True}


class PriceRange(BaseModel):
    min: float | int
    max: float | int

    model_config = {"frozen": True}


class Statistics(BaseModel):
    """Aggregate view of the catalog.

    An empty catalog yields only ``total`` and ``averagePrice`` (both 0);
    ``categories`` and ``priceRange`` are left unset and excluded from the
    response.
    """

    total: int = Field(ge=0)
    average_price: float | int = Field(alias="averagePrice")
    categories: dict[str, CategoryStats] | None = None
    price_range: PriceRange | None = Field(alias="priceRange", default=None)

    model_config = {"populate_by_name": True, "frozen": True}
