"""API эндпоинты для статистики."""

from fastapi import APIRouter, Depends

from pr_reviewer.api.dependencies import get_stats_service
from pr_reviewer.domain.stats.service import StatsService
from pr_reviewer.schemas.stats import StatsResponse

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("", response_model=StatsResponse)
async def get_stats(service: StatsService = Depends(get_stats_service)):
    """Число назначений по ревьюверам и число PR по статусам."""
    return await service.get_stats()
