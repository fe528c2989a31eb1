"""Репозиторий для работы с Pull Request'ами."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pr_reviewer.db.models import PRStatus, PullRequest, pr_reviewers, utcnow
from pr_reviewer.db.repositories.base import BaseRepository, RepositoryError


class PRIdTakenError(RepositoryError):
    """PR с таким ID уже записан в БД."""


class ReviewerNotLinkedError(RepositoryError):
    """Заменяемый ревьювер не привязан к PR."""


class ReviewerReplaceError(RepositoryError):
    """Старая связь удалена, но новую записать не удалось."""


class PRRepository(BaseRepository[PullRequest]):
    """Репозиторий Pull Request'ов."""

    def __init__(self, session: AsyncSession):
        super().__init__(PullRequest, session)

    async def get_with_reviewers(self, pr_id: str) -> PullRequest | None:
        """
        Получить PR вместе с ревьюверами.
        Объект всегда перечитывается из БД, даже если уже есть в сессии.
        """
        query = (
            select(PullRequest)
            .where(PullRequest.pull_request_id == pr_id)
            .options(selectinload(PullRequest.reviewers))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create_with_reviewers(
        self,
        pr_id: str,
        pr_name: str,
        author_id: str,
        reviewer_ids: list[str],
    ) -> PullRequest:
        """
        Создать PR со связями на ревьюверов.
        Обе записи идут в текущую транзакцию и фиксируются вместе.
        """
        pr = PullRequest(
            pull_request_id=pr_id,
            pull_request_name=pr_name,
            author_id=author_id,
            status=PRStatus.OPEN.value,
            created_at=utcnow(),
            merged_at=None,
        )
        self.session.add(pr)
        try:
            await self.session.flush()
            if reviewer_ids:
                values = [{"pr_id": pr_id, "reviewer_id": user_id} for user_id in reviewer_ids]
                await self.session.execute(insert(pr_reviewers).values(values))
        except IntegrityError as exc:
            raise PRIdTakenError(pr_id) from exc

        return await self.get_with_reviewers(pr_id)

    async def update_status(
        self, pr_id: str, status: PRStatus, merged_at: Optional[datetime] = None
    ) -> bool:
        """
        Сменить статус PR.
        Запись меняется только если статус ещё другой, поэтому повторный
        вызов не перетирает merged_at. Возвращает True, если строка изменилась.
        """
        result = await self.session.execute(
            update(PullRequest)
            .where(PullRequest.pull_request_id == pr_id, PullRequest.status != status.value)
            .values(status=status.value, merged_at=merged_at)
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) > 0

    async def replace_reviewer(self, pr_id: str, old_reviewer_id: str, new_reviewer_id: str):
        """Заменить ревьювера в PR."""
        removed = await self.session.execute(
            delete(pr_reviewers).where(
                pr_reviewers.c.pr_id == pr_id,
                pr_reviewers.c.reviewer_id == old_reviewer_id,
            )
        )
        if not removed.rowcount:
            raise ReviewerNotLinkedError(old_reviewer_id)

        try:
            await self.session.execute(
                insert(pr_reviewers).values(pr_id=pr_id, reviewer_id=new_reviewer_id)
            )
        except IntegrityError as exc:
            raise ReviewerReplaceError(new_reviewer_id) from exc

    async def get_reviewer_ids(self, pr_id: str) -> List[str]:
        """Получить ID ревьюверов PR."""
        result = await self.session.execute(
            select(pr_reviewers.c.reviewer_id)
            .where(pr_reviewers.c.pr_id == pr_id)
            .order_by(pr_reviewers.c.created_at, pr_reviewers.c.reviewer_id)
        )
        return list(result.scalars().all())

    async def get_prs_by_reviewer_id(self, user_id: str) -> List[PullRequest]:
        """Получить PR'ы, где пользователь ревьювер, от новых к старым."""
        query = (
            select(PullRequest)
            .join(pr_reviewers, PullRequest.pull_request_id == pr_reviewers.c.pr_id)
            .where(pr_reviewers.c.reviewer_id == user_id)
            .order_by(PullRequest.created_at.desc(), PullRequest.pull_request_id.desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
