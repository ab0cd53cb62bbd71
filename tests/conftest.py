"""Shared fixtures: isolated data file, app and HTTP client per test."""

import json
import time
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from catalog_api.main import create_app
from catalog_api.settings import Settings

TEST_ITEMS = [
    {"id": 1, "name": "Test Laptop", "category": "Electronics", "price": 1000},
    {"id": 2, "name": "Test Chair", "category": "Furniture", "price": 500},
]


def write_items(path: Path, items: list[dict]) -> None:
    path.write_text(json.dumps(items, indent=2), encoding="utf-8")


def read_items(path: Path) -> list[dict]:
    return json.loads(path.read_text(encoding="utf-8"))


class FakeClock:
    """Controllable stand-in for time.time()."""

    def __init__(self, start: float | None = None):
        self.now = time.time() if start is None else start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "items.json"
    write_items(path, TEST_ITEMS)
    return path


@pytest.fixture
def settings(data_file: Path) -> Settings:
    return Settings(data_path=data_file, stats_cache_ttl_seconds=300, cors_origins=[])


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
