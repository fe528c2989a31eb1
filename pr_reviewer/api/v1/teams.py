"""API эндпоинты для команд."""

from fastapi import APIRouter, Depends, Query

from pr_reviewer.api.dependencies import get_team_service
from pr_reviewer.domain.teams.service import TeamService
from pr_reviewer.schemas.team import CreateTeamRequest, TeamResponse

router = APIRouter(prefix="/team", tags=["Teams"])


@router.post("/add", response_model=TeamResponse, status_code=201)
async def add_team(
    body: CreateTeamRequest,
    service: TeamService = Depends(get_team_service),
):
    """Создать команду; уже известные пользователи переходят в неё."""
    members = [member.model_dump() for member in body.members]
    return await service.create_team(body.team_name, members)


@router.get("/get", response_model=TeamResponse)
async def get_team(
    team_name: str = Query(..., min_length=1),
    service: TeamService = Depends(get_team_service),
):
    return await service.get_team(team_name)
