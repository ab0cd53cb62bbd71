"""Catalog record model.

A Record is validated at the storage boundary: anything read from the data file
goes through ``Record`` so malformed rows fail fast instead of leaking
half-shaped dicts into the query and statistics code.
"""

import math
from dataclasses import dataclass

from pydantic import BaseModel, Field, field_validator


class Record(BaseModel):
    """A single catalog item. Immutable once created."""

    id: int
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    price: float | int

    model_config = {"frozen": True}

    @field_validator("price", mode="before")
    @classmethod
    def _reject_bool_price(cls, v: object) -> object:
        if isinstance(v, bool):
            raise ValueError("price must be a number")
        return v

    @field_validator("price")
    @classmethod
    def _non_negative_price(cls, v: float | int) -> float | int:
        try:
            as_float = float(v)
        except OverflowError:
            raise ValueError("price is out of range") from None
        if not math.isfinite(as_float):
            raise ValueError("price must be finite")
        if v < 0:
            raise ValueError("price must be >= 0")
        return v


# Point-in-time, immutable view of the whole collection (insertion order).
Snapshot = tuple[Record, ...]


@dataclass(frozen=True)
class NewItem:
    """Validated creation payload; the id is assigned by the store."""

    name: str
    category: str
    price: float | int
