"""Tests for the mtime-keyed record store cache."""

import asyncio
import os
import threading

import pytest
from pydantic import ValidationError as PydanticValidationError

from catalog_api.errors import StorageReadError, StorageWriteError
from catalog_api.models import NewItem
from catalog_api.stores import json_file
from catalog_api.stores.json_file import RecordStore

from conftest import FakeClock, TEST_ITEMS, read_items, write_items


def _bump_mtime(path, past: float) -> None:
    """Force the file's mtime strictly past ``past``."""
    ts = past + 10
    os.utime(path, (ts, ts))


@pytest.fixture
def read_counter(monkeypatch: pytest.MonkeyPatch) -> list[int]:
    calls: list[int] = []
    original = json_file.read_records

    def counting_read(path):
        calls.append(1)
        return original(path)

    monkeypatch.setattr(json_file, "read_records", counting_read)
    return calls


@pytest.mark.asyncio
async def test_ensure_fresh_loads_records_in_order(data_file):
    store = RecordStore(data_file)
    snapshot = await store.ensure_fresh()
    assert [r.id for r in snapshot] == [1, 2]
    assert snapshot[0].name == "Test Laptop"
    assert store.source_timestamp == data_file.stat().st_mtime


@pytest.mark.asyncio
async def test_ensure_fresh_is_idempotent(data_file, read_counter):
    store = RecordStore(data_file)
    first = await store.ensure_fresh()
    second = await store.ensure_fresh()
    assert first is second
    assert len(read_counter) == 1


@pytest.mark.asyncio
async def test_ensure_fresh_reloads_after_external_write(data_file, read_counter):
    store = RecordStore(data_file)
    await store.ensure_fresh()

    write_items(data_file, TEST_ITEMS + [{"id": 3, "name": "Lamp", "category": "Lighting", "price": 40}])
    _bump_mtime(data_file, store.source_timestamp)

    snapshot = await store.ensure_fresh()
    assert [r.id for r in snapshot] == [1, 2, 3]
    assert len(read_counter) == 2


@pytest.mark.asyncio
async def test_failed_reload_keeps_last_good_snapshot(data_file):
    store = RecordStore(data_file)
    good = await store.ensure_fresh()

    data_file.write_text("{not json", encoding="utf-8")
    _bump_mtime(data_file, store.source_timestamp)

    with pytest.raises(StorageReadError):
        await store.ensure_fresh()
    assert store.snapshot is good


@pytest.mark.asyncio
async def test_malformed_record_is_rejected_at_load(data_file):
    write_items(data_file, [{"id": 1, "name": "", "category": "X", "price": 5}])
    store = RecordStore(data_file)
    with pytest.raises(StorageReadError) as exc_info:
        await store.ensure_fresh()
    assert exc_info.value.detail["loc"][:2] == ["0", "name"]
    assert store.snapshot is None


@pytest.mark.asyncio
async def test_negative_price_on_disk_is_rejected(data_file):
    write_items(data_file, [{"id": 1, "name": "A", "category": "X", "price": -5}])
    with pytest.raises(StorageReadError):
        await RecordStore(data_file).ensure_fresh()


@pytest.mark.asyncio
async def test_missing_file_raises_storage_read_error(tmp_path):
    store = RecordStore(tmp_path / "missing.json")
    with pytest.raises(StorageReadError):
        await store.ensure_fresh()


@pytest.mark.asyncio
async def test_append_is_visible_without_reread(data_file, read_counter):
    store = RecordStore(data_file)
    await store.ensure_fresh()

    created = await store.append(NewItem(name="Desk Lamp", category="Lighting", price=35.5))

    snapshot = await store.ensure_fresh()
    assert snapshot[-1] == created
    assert len(snapshot) == 3
    assert len(read_counter) == 1


@pytest.mark.asyncio
async def test_append_persists_full_sequence(data_file):
    store = RecordStore(data_file)
    created = await store.append(NewItem(name="Desk Lamp", category="Lighting", price=35))

    on_disk = read_items(data_file)
    assert on_disk[:2] == TEST_ITEMS
    assert on_disk[2] == {"id": created.id, "name": "Desk Lamp", "category": "Lighting", "price": 35}


@pytest.mark.asyncio
async def test_append_assigns_timestamp_like_id(data_file):
    clock = FakeClock(start=1_700_000_000.5)
    store = RecordStore(data_file, clock=clock)
    created = await store.append(NewItem(name="A", category="B", price=1))
    assert created.id == 1_700_000_000_500


@pytest.mark.asyncio
async def test_append_ids_never_collide_on_same_tick(data_file):
    clock = FakeClock(start=1_700_000_000.0)
    store = RecordStore(data_file, clock=clock)
    first = await store.append(NewItem(name="A", category="B", price=1))
    second = await store.append(NewItem(name="C", category="D", price=2))
    assert second.id == first.id + 1


@pytest.mark.asyncio
async def test_append_failure_rolls_back_cache(data_file, monkeypatch):
    store = RecordStore(data_file)
    before = await store.ensure_fresh()
    before_stamp = store.source_timestamp

    def failing_write(path, records):
        raise StorageWriteError("Cannot write data file: disk full")

    monkeypatch.setattr(json_file, "write_records", failing_write)

    with pytest.raises(StorageWriteError):
        await store.append(NewItem(name="A", category="B", price=1))

    assert store.snapshot is before
    assert store.source_timestamp == before_stamp
    assert read_items(data_file) == TEST_ITEMS


@pytest.mark.asyncio
async def test_concurrent_appends_are_serialized(data_file):
    store = RecordStore(data_file)
    created = await asyncio.gather(
        *(store.append(NewItem(name=f"Item {i}", category="Bulk", price=i)) for i in range(5))
    )

    on_disk = read_items(data_file)
    assert len(on_disk) == 7
    assert len({r.id for r in created}) == 5
    assert {row["id"] for row in on_disk} >= {r.id for r in created}


@pytest.mark.asyncio
async def test_snapshot_is_immutable(data_file):
    store = RecordStore(data_file)
    snapshot = await store.ensure_fresh()
    assert isinstance(snapshot, tuple)
    with pytest.raises(PydanticValidationError):
        snapshot[0].price = 1  # type: ignore[misc]


@pytest.mark.asyncio
async def test_slow_reload_does_not_replace_snapshot_from_append(data_file, monkeypatch):
    ts = data_file.stat().st_mtime - 60
    os.utime(data_file, (ts, ts))

    original = json_file.read_records
    calls: list[int] = []
    read_done = threading.Event()
    release = threading.Event()

    def gated_read(path):
        first = not calls
        calls.append(1)
        records = original(path)
        if first:
            read_done.set()
            release.wait(timeout=5)
        return records

    monkeypatch.setattr(json_file, "read_records", gated_read)
    store = RecordStore(data_file)

    slow = asyncio.create_task(store.ensure_fresh())
    assert await asyncio.to_thread(read_done.wait, 5)

    created = await store.append(NewItem(name="Desk Lamp", category="Lighting", price=35))
    release.set()
    stale = await slow

    assert len(stale) == 2
    assert store.snapshot[-1] == created
    assert len(await store.ensure_fresh()) == 3
