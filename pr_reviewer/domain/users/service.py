"""Сервис для работы с пользователями."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from pr_reviewer.core.exceptions import NotFoundException
from pr_reviewer.db.repositories.pr_repository import PRRepository
from pr_reviewer.db.repositories.user_repository import UserRepository
from pr_reviewer.domain.base_service import BaseService
from pr_reviewer.schemas.pr import PullRequestShortSchema
from pr_reviewer.schemas.user import UserSchema

logger = logging.getLogger(__name__)


class UserService(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.pr_repo = PRRepository(session)

    async def set_is_active(self, user_id: str, is_active: bool) -> dict:
        """
        Установить флаг активности пользователя.
        Уже назначенные ревью остаются за ним, флаг влияет только на будущий выбор.
        """
        user = await self.user_repo.set_active(user_id, is_active)
        if user is None:
            raise NotFoundException(f"user with id {user_id}")

        await self.commit()
        logger.info("User %s is_active=%s", user_id, is_active)
        schema = UserSchema(
            user_id=user.user_id,
            username=user.username,
            team_name=user.team_name,
            is_active=user.is_active,
        )
        return {"user": schema.model_dump()}

    async def get_reviews(self, user_id: str) -> dict:
        """PR'ы, где пользователь назначен ревьювером. Статус PR не важен."""
        if not await self.user_repo.exists(user_id):
            raise NotFoundException(f"user with id {user_id}")

        prs = await self.pr_repo.get_prs_by_reviewer_id(user_id)
        return {
            "user_id": user_id,
            "pull_requests": [
                PullRequestShortSchema.model_validate(pr).model_dump(mode="json") for pr in prs
            ],
        }
