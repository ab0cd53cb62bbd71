"""Statistics engine for /api/stats.

Aggregates:
- total: number of records
- averagePrice: mean price, rounded half-up to 2 decimals
- categories: per-category count and average price
- priceRange: min/max price

Caching (two layers, checked in order):
1. Wall-clock window: a summary younger than the TTL is returned without
   touching the disk.
2. Storage check: once the window has passed, stat the data file; if it has not
   been modified since the summary was computed, re-stamp and reuse it.
Otherwise the file is read and the summary recomputed.

The engine reads the data file itself instead of sharing the record store's
snapshot, so after a write the item listing and the statistics can disagree
until the statistics window runs out.
"""

import asyncio
import logging
import math
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from catalog_api.models import Record
from catalog_api.schemas import CategoryStats, PriceRange, Statistics
from catalog_api.stores.json_file import read_records, storage_mtime

logger = logging.getLogger("uvicorn.error")

STATS_CACHE_TTL = 300.0  # 5 minutes


def round_price(value: float) -> float:
    """Round half-up to 2 decimals (0.125 -> 0.13, where round() gives 0.12).

    Values too large to scale by 100 have no cents to round and are returned as is.
    """
    value = float(value)
    scaled = value * 100
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / 100


def _mean(values: list[float | int]) -> float:
    if not values:
        return 0
    n = len(values)
    total = sum(values)
    if isinstance(total, float) and not math.isfinite(total):
        # Sum overflowed the float range; average term by term instead.
        return sum(v / n for v in values)
    return total / n


def compute_statistics(records: Iterable[Record]) -> Statistics:
    """Derive aggregate statistics from a record sequence.

    Returns:
        Full Statistics, or ``Statistics(total=0, average_price=0)`` with no
        categories/priceRange when there are no records.
    """
    records = list(records)
    if not records:
        return Statistics(total=0, average_price=0)

    prices = [r.price for r in records]

    # dict keeps first-seen order; member prices stay in record order
    by_category: dict[str, list[float | int]] = {}
    for record in records:
        by_category.setdefault(record.category, []).append(record.price)

    return Statistics(
        total=len(records),
        average_price=round_price(_mean(prices)),
        categories={
            category: CategoryStats(count=len(cat_prices), average_price=round_price(_mean(cat_prices)))
            for category, cat_prices in by_category.items()
        },
        price_range=PriceRange(min=min(prices), max=max(prices)),
    )


@dataclass(frozen=True)
class _StatsEntry:
    summary: Statistics
    computed_at: float


class StatisticsEngine:
    """Cached statistics over the catalog file."""

    def __init__(
        self,
        path: Path,
        *,
        ttl_seconds: float = STATS_CACHE_TTL,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path)
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: _StatsEntry | None = None

    @property
    def computed_at(self) -> float | None:
        return self._entry.computed_at if self._entry else None

    async def get_statistics(self) -> Statistics:
        """Return catalog statistics, recomputing only when needed.

        Raises:
            StorageReadError: If the data file cannot be stat'ed or read. The
                cached summary is kept.
        """
        now = self._clock()
        entry = self._entry

        if entry is not None and now - entry.computed_at < self.ttl_seconds:
            return entry.summary

        mtime = await asyncio.to_thread(storage_mtime, self.path)
        if entry is not None and mtime <= entry.computed_at:
            self._entry = _StatsEntry(summary=entry.summary, computed_at=now)
            return entry.summary

        records = await asyncio.to_thread(read_records, self.path)
        summary = compute_statistics(records)
        self._entry = _StatsEntry(summary=summary, computed_at=now)
        logger.info(f"Statistics recomputed: total={summary.total}")
        return summary
