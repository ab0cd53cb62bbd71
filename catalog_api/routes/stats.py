"""Statistics endpoint.

GET /api/stats - Aggregate catalog statistics (cached, see services.statistics).
"""

from fastapi import APIRouter, Depends

from catalog_api.routes.deps import get_statistics_engine
from catalog_api.schemas import Statistics
from catalog_api.services.statistics import StatisticsEngine

router = APIRouter()


@router.get("", response_model=Statistics, response_model_exclude_none=True)
async def get_stats(
    engine: StatisticsEngine = Depends(get_statistics_engine),
) -> Statistics:
    """Get catalog statistics.

    An empty catalog returns only ``total`` and ``averagePrice``.
    """
    return await engine.get_statistics()
