"""Схемы для пользователей."""

from pydantic import BaseModel

from pr_reviewer.schemas.pr import NonEmptyStr, PullRequestShortSchema


class UserSchema(BaseModel):
    """Пользователь вместе с названием его команды."""

    user_id: str
    username: str
    team_name: str
    is_active: bool


class UserResponse(BaseModel):
    user: UserSchema


class SetIsActiveRequest(BaseModel):
    user_id: NonEmptyStr
    is_active: bool


class GetReviewsResponse(BaseModel):
    """PR'ы, где пользователь сейчас ревьювер, от новых к старым."""

    user_id: str
    pull_requests: list[PullRequestShortSchema]
