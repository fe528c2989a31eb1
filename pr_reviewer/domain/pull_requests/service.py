"""Сервис для работы с Pull Request'ами."""

import logging
import random
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from pr_reviewer.core.exceptions import (
    NoCandidateException,
    NotAssignedException,
    NotFoundException,
    PRExistsException,
    PRMergedException,
)
from pr_reviewer.db.models import PRStatus, PullRequest, User, utcnow
from pr_reviewer.db.repositories.pr_repository import (
    PRIdTakenError,
    PRRepository,
    ReviewerNotLinkedError,
    ReviewerReplaceError,
)
from pr_reviewer.db.repositories.team_repository import TeamRepository
from pr_reviewer.db.repositories.user_repository import UserRepository
from pr_reviewer.domain.base_service import BaseService
from pr_reviewer.domain.pull_requests.selector import (
    CREATE_REVIEWERS_LIMIT,
    REASSIGN_REVIEWERS_LIMIT,
    select_reviewers,
)

logger = logging.getLogger(__name__)


class PullRequestService(BaseService):
    """
    Жизненный цикл Pull Request: создание с автоназначением ревьюверов,
    merge (OPEN -> MERGED, идемпотентно) и замена ревьювера.
    """

    def __init__(self, session: AsyncSession, rng: Optional[random.Random] = None):
        super().__init__(session)
        self.rng = rng
        self.pr_repo = PRRepository(session)
        self.user_repo = UserRepository(session)
        self.team_repo = TeamRepository(session)

    async def create_pr(self, pr_id: str, pr_name: str, author_id: str) -> dict:
        """Создать PR и автоматически назначить до 2 ревьюверов из команды автора."""
        if await self.pr_repo.exists(pr_id):
            raise PRExistsException()

        author = await self.user_repo.get(author_id, reload=True)
        if not author:
            raise NotFoundException(f"user with id {author_id}")

        members = await self._team_roster(author)
        reviewer_ids = select_reviewers(members, author_id, CREATE_REVIEWERS_LIMIT, self.rng)

        try:
            pr = await self.pr_repo.create_with_reviewers(pr_id, pr_name, author_id, reviewer_ids)
        except PRIdTakenError:
            logger.warning("PR %s was created concurrently", pr_id)
            raise PRExistsException()

        await self.commit()
        logger.info("PR %s created by %s, reviewers: %s", pr_id, author_id, reviewer_ids)
        return {"pr": self._pr_to_schema(pr)}

    async def merge_pr(self, pr_id: str) -> dict:
        """Пометить PR как MERGED (идемпотентная операция)."""
        pr = await self.pr_repo.get_with_reviewers(pr_id)
        if not pr:
            raise NotFoundException(f"pull request with id {pr_id}")

        if pr.status == PRStatus.MERGED.value:
            return {"pr": self._pr_to_schema(pr)}

        changed = await self.pr_repo.update_status(pr_id, PRStatus.MERGED, utcnow())
        if not changed:
            # Параллельный merge успел раньше, его merged_at остаётся
            logger.info("PR %s was merged concurrently", pr_id)

        pr = await self.pr_repo.get_with_reviewers(pr_id)
        if not pr:
            raise NotFoundException(f"pull request with id {pr_id}")

        await self.commit()
        logger.info("PR %s merged at %s", pr_id, pr.merged_at)
        return {"pr": self._pr_to_schema(pr)}

    async def reassign_reviewer(self, pr_id: str, old_user_id: str) -> dict:
        """
        Заменить ревьювера на случайного активного участника его команды.

        Замена берётся из команды старого ревьювера, а не автора. Автор PR и
        остальные текущие ревьюверы в кандидаты не попадают.
        """
        pr = await self.pr_repo.get_with_reviewers(pr_id)
        if not pr:
            raise NotFoundException(f"pull request with id {pr_id}")

        if pr.status == PRStatus.MERGED.value:
            raise PRMergedException()

        current_ids = pr.reviewer_ids
        if old_user_id not in current_ids:
            raise NotAssignedException()

        old_reviewer = await self.user_repo.get(old_user_id, reload=True)
        if not old_reviewer:
            raise NotFoundException(f"user with id {old_user_id}")

        members = await self._team_roster(old_reviewer)
        others = (set(current_ids) - {old_user_id}) | {pr.author_id}
        candidates = [m for m in members if m.user_id not in others]

        selected = select_reviewers(candidates, old_user_id, REASSIGN_REVIEWERS_LIMIT, self.rng)
        if not selected:
            raise NoCandidateException()
        new_user_id = selected[0]

        try:
            await self.pr_repo.replace_reviewer(pr_id, old_user_id, new_user_id)
        except (ReviewerNotLinkedError, ReviewerReplaceError) as exc:
            logger.warning(
                "Reviewer swap %s -> %s on %s failed: %r", old_user_id, new_user_id, pr_id, exc
            )
            raise NotAssignedException()

        pr = await self.pr_repo.get_with_reviewers(pr_id)
        if not pr:
            raise NotFoundException(f"pull request with id {pr_id}")

        await self.commit()
        logger.info("PR %s: reviewer %s replaced by %s", pr_id, old_user_id, new_user_id)
        return {"pr": self._pr_to_schema(pr), "replaced_by": new_user_id}

    async def _team_roster(self, user: User) -> list[User]:
        """Активные участники команды пользователя."""
        team = await self.team_repo.get(user.team_id, reload=True)
        if not team:
            raise NotFoundException(f"team of user {user.user_id}")
        return await self.user_repo.list_team(team.id, only_active=True)

    def _pr_to_schema(self, pr: PullRequest) -> dict:
        """Преобразовать модель в схему."""
        return {
            "pull_request_id": pr.pull_request_id,
            "pull_request_name": pr.pull_request_name,
            "author_id": pr.author_id,
            "status": pr.status,
            "assigned_reviewers": pr.reviewer_ids,
            "createdAt": pr.created_at.isoformat() if pr.created_at else None,
            "mergedAt": pr.merged_at.isoformat() if pr.merged_at else None,
        }
