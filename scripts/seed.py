#!/usr/bin/env python3
"""Seed the catalog data file with sample items.

Creates:
- A JSON array of sample items (electronics, furniture, ...) at DATA_PATH

Refuses to overwrite an existing catalog unless --force is given.

Usage:
    python -m scripts.seed
    python -m scripts.seed --force
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from catalog_api.models import Record
from catalog_api.settings import get_settings
from catalog_api.stores.json_file import write_records

load_dotenv()

SAMPLE_ITEMS = [
    {"id": 1, "name": "Laptop Pro", "category": "Electronics", "price": 2499},
    {"id": 2, "name": "Noise Cancelling Headphones", "category": "Electronics", "price": 399},
    {"id": 3, "name": "Ultra-Wide Monitor", "category": "Electronics", "price": 999},
    {"id": 4, "name": "Ergonomic Chair", "category": "Furniture", "price": 799},
    {"id": 5, "name": "Standing Desk", "category": "Furniture", "price": 1199},
]


async def seed_catalog(path: Path, *, force: bool = False) -> int:
    """Write the sample catalog to ``path``.

    Returns:
        Number of items written (0 if the file existed and force was not set).
    """
    if path.exists() and not force:
        print(f"  ⏭️  {path} already exists (use --force to overwrite)")
        return 0

    records = tuple(Record.model_validate(item) for item in SAMPLE_ITEMS)
    await asyncio.to_thread(write_records, path, records)
    for record in records:
        print(f"  ✅ {record.name} - {record.category} (${record.price})")
    return len(records)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the catalog data file")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing catalog")
    parser.add_argument("--path", type=Path, default=None, help="Data file (default: DATA_PATH setting)")
    args = parser.parse_args()

    path = args.path or get_settings().data_path
    print(f"Seeding catalog at {path}")
    written = await seed_catalog(path, force=args.force)
    print(f"Done: {written} items written")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(130)
