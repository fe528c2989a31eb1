"""Схемы для статистики."""

from pydantic import BaseModel

from pr_reviewer.db.models import PRStatus


class ReviewerStatSchema(BaseModel):
    """Число назначений на ревьювера."""

    user_id: str
    username: str
    assignment_count: int


class PRStatusStatSchema(BaseModel):
    """Число PR в статусе."""

    status: PRStatus
    count: int


class StatsResponse(BaseModel):
    """Ответ со статистикой."""

    reviewer_stats: list[ReviewerStatSchema]
    pr_stats: list[PRStatusStatSchema]
