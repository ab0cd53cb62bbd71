"""Items endpoints.

GET  /api/items       - Search + paginated listing
GET  /api/items/{id}  - Single item
POST /api/items       - Create item (server-assigned id)

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Depends, Query, status

from catalog_api.models import Record
from catalog_api.routes.deps import get_app_settings, get_record_store
from catalog_api.schemas import CreateItemRequest, ErrorResponse, ItemsResponse
from catalog_api.services.query import find_by_id, query
from catalog_api.settings import Settings
from catalog_api.stores.json_file import RecordStore

router = APIRouter()


@router.get("", response_model=ItemsResponse)
async def list_items(
    q: str | None = Query(default=None, description="Case-insensitive name/category filter"),
    # Kept as strings: invalid values fall back to defaults instead of a 422.
    page: str | None = Query(default=None, description="1-based page number", examples=["1"]),
    limit: str | None = Query(default=None, description="Page size", examples=["10"]),
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> ItemsResponse:
    """List items, optionally filtered by a search term."""
    snapshot = await store.ensure_fresh()
    result = query(snapshot, q, page, limit, default_limit=settings.default_page_size)
    return ItemsResponse(items=result.results, pagination=result.pagination)


@router.get(
    "/{item_id}",
    response_model=Record,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: str,
    store: RecordStore = Depends(get_record_store),
) -> Record:
    """Get a single item by id.

    Raises:
        NotFoundError: If the id is unknown (mapped to 404).
    """
    snapshot = await store.ensure_fresh()
    return find_by_id(snapshot, item_id)


@router.post(
    "",
    response_model=Record,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateItemRequest,
    store: RecordStore = Depends(get_record_store),
) -> Record:
    """Create a new item.

    Body violations are reported as 400 with the first failing rule's message.
    """
    return await store.append(request.to_new_item())
