"""Domain models."""

from catalog_api.models.record import NewItem, Record, Snapshot

__all__ = [
    "NewItem",
    "Record",
    "Snapshot",
]
