"""Схемы для команд."""

from pydantic import BaseModel, Field

from pr_reviewer.schemas.pr import NonEmptyStr


class TeamMemberSchema(BaseModel):
    """Участник команды; без is_active считается активным."""

    user_id: NonEmptyStr
    username: str
    is_active: bool = True


class TeamSchema(BaseModel):
    team_name: str
    members: list[TeamMemberSchema]


class TeamResponse(BaseModel):
    team: TeamSchema


class CreateTeamRequest(BaseModel):
    team_name: NonEmptyStr
    members: list[TeamMemberSchema] = Field(default_factory=list)
