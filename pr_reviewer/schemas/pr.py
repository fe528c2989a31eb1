"""Схемы для Pull Request'ов."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from pr_reviewer.db.models import PRStatus

# Идентификаторы и имена во входящих запросах не могут быть пустыми
NonEmptyStr = Annotated[str, Field(min_length=1)]


class PullRequestShortSchema(BaseModel):
    """PR без ревьюверов и дат, как в списке ревью пользователя."""

    model_config = ConfigDict(from_attributes=True)

    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PRStatus


class PullRequestSchema(PullRequestShortSchema):
    assigned_reviewers: list[str] = Field(default_factory=list)
    createdAt: datetime | None = None
    mergedAt: datetime | None = None


class PullRequestResponse(BaseModel):
    pr: PullRequestSchema


class ReassignResponse(PullRequestResponse):
    replaced_by: str


class CreatePRRequest(BaseModel):
    pull_request_id: NonEmptyStr
    pull_request_name: NonEmptyStr
    author_id: NonEmptyStr


class MergePRRequest(BaseModel):
    pull_request_id: NonEmptyStr


class ReassignRequest(BaseModel):
    """Замена old_user_id на другого участника его команды."""

    pull_request_id: NonEmptyStr
    old_user_id: NonEmptyStr
