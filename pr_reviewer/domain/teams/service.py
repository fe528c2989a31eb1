"""Сервис для работы с командами."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from pr_reviewer.core.exceptions import NotFoundException, TeamExistsException
from pr_reviewer.db.models import Team
from pr_reviewer.db.repositories.team_repository import TeamNameTakenError, TeamRepository
from pr_reviewer.db.repositories.user_repository import UserRepository
from pr_reviewer.domain.base_service import BaseService
from pr_reviewer.schemas.team import TeamMemberSchema, TeamSchema

logger = logging.getLogger(__name__)


class TeamService(BaseService):
    """Сервис для работы с командами."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.team_repo = TeamRepository(session)
        self.user_repo = UserRepository(session)

    async def create_team(self, team_name: str, members: list[dict]) -> dict:
        """
        Создать команду с участниками.

        Существующие пользователи переносятся в новую команду с новым флагом
        активности, остальные создаются. После записи команда перечитывается:
        заполненный updated_at означает, что её параллельно изменил кто-то ещё.
        """
        if await self.team_repo.name_taken(team_name):
            raise TeamExistsException()

        try:
            team = await self.team_repo.create(team_name)
        except TeamNameTakenError:
            logger.warning("Team %s was created concurrently", team_name)
            raise TeamExistsException()

        for member_data in members:
            member = TeamMemberSchema(**member_data)
            user = await self.user_repo.get(member.user_id)
            if user:
                await self.user_repo.save(
                    user,
                    username=member.username,
                    team_id=team.id,
                    is_active=member.is_active,
                )
            else:
                await self.user_repo.add(
                    user_id=member.user_id,
                    username=member.username,
                    team_id=team.id,
                    is_active=member.is_active,
                )

        stored = await self.team_repo.get_by_name(team_name, reload=True)
        if not stored:
            raise NotFoundException(f"team with name {team_name}")
        if stored.updated_at is not None:
            logger.warning("Team %s was modified concurrently during creation", team_name)
            raise TeamExistsException()

        body = {"team": await self._team_to_schema(stored)}
        await self.commit()

        logger.info("Team %s created with %d members", team_name, len(members))
        return body

    async def get_team(self, team_name: str) -> dict:
        """Получить команду с участниками."""
        team = await self.team_repo.get_by_name(team_name)
        if not team:
            raise NotFoundException(f"team with name {team_name}")

        return {"team": await self._team_to_schema(team)}

    async def _team_to_schema(self, team: Team) -> dict:
        """Преобразовать модель в схему, участники читаются из БД."""
        members = await self.user_repo.list_team(team.id)
        schema = TeamSchema(
            team_name=team.team_name,
            members=[
                TeamMemberSchema(
                    user_id=m.user_id, username=m.username, is_active=m.is_active
                )
                for m in members
            ],
        )
        return schema.model_dump()
