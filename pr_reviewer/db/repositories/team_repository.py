"""Репозиторий для работы с командами."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pr_reviewer.db.models import Team
from pr_reviewer.db.repositories.base import BaseRepository, RepositoryError


class TeamNameTakenError(RepositoryError):
    """Команда с таким именем уже записана в БД."""


class TeamRepository(BaseRepository[Team]):
    """Репозиторий команд."""

    def __init__(self, session: AsyncSession):
        super().__init__(Team, session)

    async def get_by_name(self, team_name: str, reload: bool = False) -> Optional[Team]:
        """
        Получить команду по имени.
        С reload=True значения перечитываются из БД даже для уже загруженного объекта.
        """
        query = select(Team).where(Team.team_name == team_name)
        if reload:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def name_taken(self, team_name: str) -> bool:
        result = await self.session.execute(select(Team.id).where(Team.team_name == team_name))
        return result.scalar_one_or_none() is not None

    async def create(self, team_name: str) -> Team:
        """Создать команду. Нарушение уникальности имени -> TeamNameTakenError."""
        try:
            return await self.add(team_name=team_name)
        except IntegrityError as exc:
            raise TeamNameTakenError(team_name) from exc
