"""JSON file store with an mtime-keyed in-memory cache.

Handles:
- Reading/writing the whole catalog as one JSON array
- Keeping the last parsed snapshot in memory
- Reloading only when the file's modification time moves past the cached one

Consistency:
- The cache entry (snapshot + source timestamp) is replaced as one object,
  so readers never see a snapshot paired with the wrong timestamp.
- A failed read or write never touches the current entry.
- Appends are serialized by an asyncio.Lock; reads are lock-free.

File I/O runs in worker threads so a slow disk only stalls the request that
issued it.
"""

import asyncio
import contextlib
import json
import logging
import os
import tempfile
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from catalog_api.errors import StorageReadError, StorageWriteError
from catalog_api.models import NewItem, Record, Snapshot

logger = logging.getLogger("uvicorn.error")

_RECORDS = TypeAdapter(list[Record])


# ============================================================
# Raw file access (blocking; call through asyncio.to_thread)
# ============================================================


def storage_mtime(path: Path) -> float:
    """Return the data file's modification time (epoch seconds).

    Raises:
        StorageReadError: If the file cannot be stat'ed.
    """
    try:
        return path.stat().st_mtime
    except OSError as e:
        raise StorageReadError(f"Cannot access data file: {e.strerror or e}") from e


def read_records(path: Path) -> Snapshot:
    """Read and validate the full record sequence.

    Raises:
        StorageReadError: If the file cannot be read or any row is malformed.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StorageReadError(f"Cannot read data file: {e.strerror or e}") from e

    try:
        return tuple(_RECORDS.validate_json(raw))
    except PydanticValidationError as e:
        first = e.errors()[0] if e.error_count() else {}
        raise StorageReadError(
            "Data file is malformed",
            detail={
                "errors": e.error_count(),
                "loc": [str(part) for part in first.get("loc", ())],
                "reason": first.get("msg", ""),
            },
        ) from e


def write_records(path: Path, records: Snapshot) -> float:
    """Persist the full record sequence and return the new modification time.

    The payload goes to a temp file in the same directory and is renamed over
    the data file, so a crash mid-write leaves the previous file intact.

    Raises:
        StorageWriteError: If the file cannot be written.
    """
    payload = json.dumps([r.model_dump() for r in records], indent=2, ensure_ascii=False)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
        return path.stat().st_mtime
    except OSError as e:
        raise StorageWriteError(f"Cannot write data file: {e.strerror or e}") from e


# ============================================================
# Record store cache
# ============================================================


@dataclass(frozen=True)
class _CacheEntry:
    snapshot: Snapshot
    source_timestamp: float


class RecordStore:
    """Owns the in-memory copy of the catalog file.

    Constructed once per application (see ``create_app``) and handed to
    request handlers; tests build one per case against a temp file.
    """

    def __init__(self, path: Path, *, clock: Callable[[], float] = time.time):
        self.path = Path(path)
        self._clock = clock
        self._entry: _CacheEntry | None = None
        self._write_lock = asyncio.Lock()

    @property
    def snapshot(self) -> Snapshot | None:
        """Currently cached snapshot, without any freshness check."""
        return self._entry.snapshot if self._entry else None

    @property
    def source_timestamp(self) -> float | None:
        return self._entry.source_timestamp if self._entry else None

    async def ensure_fresh(self) -> Snapshot:
        """Return the current snapshot, reloading the file if it changed.

        Returns:
            The cached snapshot, or a freshly loaded one when the cache is empty
            or the file's mtime is newer than the cached source timestamp.

        Raises:
            StorageReadError: On stat/read/parse failure. The cached entry is
                left as it was.
        """
        # Stat before reading: if the file changes in between, the stored
        # timestamp is older than the content and the next call reloads again.
        mtime = await asyncio.to_thread(storage_mtime, self.path)
        entry = self._entry
        if entry is not None and mtime <= entry.source_timestamp:
            return entry.snapshot

        snapshot = await asyncio.to_thread(read_records, self.path)

        # Another coroutine may have installed a newer entry while we were reading.
        current = self._entry
        if current is None or mtime > current.source_timestamp:
            self._entry = _CacheEntry(snapshot=snapshot, source_timestamp=mtime)
            logger.info(f"Record cache loaded: {len(snapshot)} items from {self.path}")
        return snapshot

    async def append(self, item: NewItem) -> Record:
        """Create a record, persist the whole catalog and update the cache.

        Raises:
            StorageReadError: If the current catalog cannot be loaded.
            StorageWriteError: If persisting fails. The cached snapshot stays
                at its pre-append value.
        """
        async with self._write_lock:
            current = await self.ensure_fresh()
            record = Record(
                id=self._next_id(current),
                name=item.name,
                category=item.category,
                price=item.price,
            )
            updated = current + (record,)
            mtime = await asyncio.to_thread(write_records, self.path, updated)
            # Stamp with the post-write mtime so the next ensure_fresh() doesn't reload.
            self._entry = _CacheEntry(snapshot=updated, source_timestamp=mtime)

        logger.info(f"Item created: id={record.id} category={record.category!r}")
        return record

    def _next_id(self, snapshot: Snapshot) -> int:
        """Millisecond timestamp, bumped past the largest existing id."""
        highest = max((r.id for r in snapshot), default=0)
        return max(int(self._clock() * 1000), highest + 1)
