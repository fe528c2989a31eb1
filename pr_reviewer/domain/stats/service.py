"""Сервис для работы со статистикой."""

from sqlalchemy.ext.asyncio import AsyncSession

from pr_reviewer.db.repositories.stats_repository import StatsRepository
from pr_reviewer.domain.base_service import BaseService


class StatsService(BaseService):
    """Сервис для работы со статистикой."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.stats_repo = StatsRepository(session)

    async def get_stats(self) -> dict:
        """Получить число назначений по ревьюверам и число PR по статусам."""
        return {
            "reviewer_stats": await self.stats_repo.reviewer_stats(),
            "pr_stats": await self.stats_repo.pr_stats_by_status(),
        }
