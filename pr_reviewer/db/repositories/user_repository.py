"""Репозиторий для работы с пользователями."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pr_reviewer.db.models import User
from pr_reviewer.db.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Репозиторий пользователей."""

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_with_team(self, user_id: str) -> Optional[User]:
        """Получить пользователя вместе с командой, значения перечитываются из БД."""
        query = (
            select(User)
            .where(User.user_id == user_id)
            .options(selectinload(User.team))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_team(self, team_id: int, only_active: bool = False) -> List[User]:
        """Участники команды в порядке добавления."""
        query = select(User).where(User.team_id == team_id)
        if only_active:
            query = query.where(User.is_active.is_(True))
        query = query.order_by(User.created_at, User.user_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def set_active(self, user_id: str, is_active: bool) -> Optional[User]:
        user = await self.get_with_team(user_id)
        if user:
            await self.save(user, is_active=is_active)
        return user
