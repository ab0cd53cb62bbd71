"""Async client for the catalog API with last-page state.

Keeps what a UI needs between interactions:
- items / pagination of the last fetched page (and the search used)
- the last error message, if any

After a successful ``add_item`` the current page is fetched again so the new
item shows up without the caller re-issuing the query.
"""

import logging
from typing import Any

import httpx

from catalog_api.models import Record
from catalog_api.schemas import ItemsResponse, Pagination, Statistics

logger = logging.getLogger("uvicorn.error")


class CatalogClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _empty_pagination(limit: int = 10) -> Pagination:
    return Pagination(
        current_page=1,
        total_items=0,
        total_pages=0,
        items_per_page=limit,
        has_next_page=False,
        has_prev_page=False,
    )


def _error_message(resp: httpx.Response, fallback: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message") or fallback)
    return fallback


class CatalogClient:
    """Client for the catalog HTTP API.

    Usage:
        async with CatalogClient("http://localhost:3001") as client:
            await client.fetch_items(page=1, limit=10, search="desk")
            print(client.items, client.pagination.total_items)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self._http_client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.items: list[Record] = []
        self.pagination: Pagination = _empty_pagination()
        self.search: str = ""
        self.error: str | None = None

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http_client.aclose()

    async def fetch_items(self, page: int = 1, limit: int = 10, search: str = "") -> list[Record]:
        """Fetch one page of items and remember it.

        Raises:
            CatalogClientError: On a non-2xx response, a transport failure or
                a body that is not a valid page. ``items`` is cleared and
                ``error`` set.
        """
        self.error = None
        params: dict[str, Any] = {"page": str(page), "limit": str(limit)}
        if search:
            params["q"] = search

        try:
            resp = await self._http_client.get("/api/items", params=params)
            if resp.status_code != 200:
                raise CatalogClientError(f"HTTP error! status: {resp.status_code}", status_code=resp.status_code)
            # Invalid JSON and pydantic ValidationError are both ValueError
            payload = ItemsResponse.model_validate(resp.json())
        except (CatalogClientError, httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching items: {e}")
            self.error = str(e)
            self.items = []
            if isinstance(e, CatalogClientError):
                raise
            raise CatalogClientError(str(e)) from e

        self.items = payload.items
        self.pagination = payload.pagination
        self.search = search
        return self.items

    async def add_item(self, data: dict[str, Any]) -> Record:
        """Create an item, then refresh the current page.

        Raises:
            CatalogClientError: With the server's error message on rejection,
                or the transport/decoding failure otherwise. ``error`` is set.
        """
        self.error = None
        try:
            resp = await self._http_client.post("/api/items", json=data)
        except httpx.HTTPError as e:
            logger.error(f"Error adding item: {e}")
            self.error = str(e)
            raise CatalogClientError(str(e)) from e

        if resp.status_code != 201:
            message = _error_message(resp, "Failed to add item")
            logger.error(f"Error adding item: {message}")
            self.error = message
            raise CatalogClientError(message, status_code=resp.status_code)

        try:
            created = Record.model_validate(resp.json())
        except ValueError as e:
            logger.error(f"Error adding item: unexpected response body: {e}")
            self.error = "Failed to add item"
            raise CatalogClientError(self.error, status_code=resp.status_code) from e

        await self.fetch_items(self.pagination.current_page, self.pagination.items_per_page, self.search)
        return created

    async def get_item(self, item_id: int) -> Record:
        resp = await self._http_client.get(f"/api/items/{item_id}")
        if resp.status_code != 200:
            raise CatalogClientError(_error_message(resp, "Failed to load item"), status_code=resp.status_code)
        return Record.model_validate(resp.json())

    async def get_stats(self) -> Statistics:
        resp = await self._http_client.get("/api/stats")
        if resp.status_code != 200:
            raise CatalogClientError(_error_message(resp, "Failed to load stats"), status_code=resp.status_code)
        return Statistics.model_validate(resp.json())
