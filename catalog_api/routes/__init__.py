"""API routes."""

from fastapi import APIRouter

from catalog_api.routes import items, stats

api_router = APIRouter()

# Catalog items (list/search, lookup, create)
api_router.include_router(items.router, prefix="/api/items", tags=["items"])

# Aggregate statistics
api_router.include_router(stats.router, prefix="/api/stats", tags=["stats"])
