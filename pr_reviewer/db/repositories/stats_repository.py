"""Репозиторий для статистики."""

from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pr_reviewer.db.models import PRStatus, PullRequest, User, pr_reviewers


class StatsRepository:
    """Агрегаты по назначениям и статусам PR."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def reviewer_stats(self) -> List[dict]:
        """Количество назначений на каждого пользователя, включая нулевые."""
        assignment_count = func.count(pr_reviewers.c.pr_id).label("assignment_count")
        query = (
            select(User.user_id, User.username, assignment_count)
            .outerjoin(pr_reviewers, User.user_id == pr_reviewers.c.reviewer_id)
            .group_by(User.user_id, User.username)
            .order_by(assignment_count.desc(), User.user_id)
        )
        result = await self.session.execute(query)
        return [
            {
                "user_id": row.user_id,
                "username": row.username,
                "assignment_count": int(row.assignment_count or 0),
            }
            for row in result.all()
        ]

    async def pr_stats_by_status(self) -> List[dict]:
        """Количество PR по статусам, включая статусы без PR."""
        result = await self.session.execute(
            select(PullRequest.status, func.count(PullRequest.pull_request_id)).group_by(
                PullRequest.status
            )
        )
        counts = {status: count for status, count in result.all()}
        return [
            {"status": status.value, "count": int(counts.get(status.value, 0))}
            for status in sorted(PRStatus, key=lambda s: s.value)
        ]
