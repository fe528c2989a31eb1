"""Зависимости для API."""

from collections.abc import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pr_reviewer.core.database import session_scope
from pr_reviewer.domain.pull_requests.service import PullRequestService
from pr_reviewer.domain.stats.service import StatsService
from pr_reviewer.domain.teams.service import TeamService
from pr_reviewer.domain.users.service import UserService


async def get_session() -> AsyncIterator[AsyncSession]:
    """Получить сессию БД на время запроса."""
    async with session_scope() as session:
        yield session


# Сервисы создаются на каждый запрос поверх его сессии


def get_team_service(session: AsyncSession = Depends(get_session)) -> TeamService:
    return TeamService(session)


def get_user_service(session: AsyncSession = Depends(get_session)) -> UserService:
    return UserService(session)


def get_pr_service(session: AsyncSession = Depends(get_session)) -> PullRequestService:
    return PullRequestService(session)


def get_stats_service(session: AsyncSession = Depends(get_session)) -> StatsService:
    return StatsService(session)
