"""API эндпоинты для Pull Request'ов."""

from fastapi import APIRouter, Depends

from pr_reviewer.api.dependencies import get_pr_service
from pr_reviewer.domain.pull_requests.service import PullRequestService
from pr_reviewer.schemas.pr import (
    CreatePRRequest,
    MergePRRequest,
    PullRequestResponse,
    ReassignRequest,
    ReassignResponse,
)

router = APIRouter(prefix="/pullRequest", tags=["PullRequests"])


@router.post("/create", response_model=PullRequestResponse, status_code=201)
async def create_pr(
    body: CreatePRRequest,
    service: PullRequestService = Depends(get_pr_service),
):
    """Создать PR, ревьюверы назначаются автоматически из команды автора."""
    return await service.create_pr(body.pull_request_id, body.pull_request_name, body.author_id)


@router.post("/merge", response_model=PullRequestResponse)
async def merge_pr(
    body: MergePRRequest,
    service: PullRequestService = Depends(get_pr_service),
):
    """Перевести PR в MERGED. Повторный вызов возвращает тот же результат."""
    return await service.merge_pr(body.pull_request_id)


@router.post("/reassign", response_model=ReassignResponse)
async def reassign_reviewer(
    body: ReassignRequest,
    service: PullRequestService = Depends(get_pr_service),
):
    return await service.reassign_reviewer(body.pull_request_id, body.old_user_id)
