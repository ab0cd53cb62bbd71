import pytest

from scripts.seed import SAMPLE_ITEMS, seed_catalog

from conftest import TEST_ITEMS, read_items


@pytest.mark.asyncio
async def test_seed_writes_sample_catalog(tmp_path):
    path = tmp_path / "nested" / "items.json"
    written = await seed_catalog(path)
    assert written == len(SAMPLE_ITEMS)
    assert read_items(path) == SAMPLE_ITEMS


@pytest.mark.asyncio
async def test_seed_keeps_existing_catalog(data_file):
    assert await seed_catalog(data_file) == 0
    assert read_items(data_file) == TEST_ITEMS


@pytest.mark.asyncio
async def test_seed_force_overwrites(data_file):
    assert await seed_catalog(data_file, force=True) == len(SAMPLE_ITEMS)
    assert read_items(data_file) == SAMPLE_ITEMS
