"""Data stores for persistence and caching.

Stores handle:
- JSON file: reading/writing the catalog file, mtime-keyed snapshot cache

No query/aggregation logic in stores - that belongs in services.
"""

from catalog_api.stores.json_file import RecordStore, read_records, storage_mtime, write_records

__all__ = [
    "RecordStore",
    "read_records",
    "storage_mtime",
    "write_records",
]
