"""API эндпоинты для пользователей."""

from fastapi import APIRouter, Depends, Query

from pr_reviewer.api.dependencies import get_user_service
from pr_reviewer.domain.users.service import UserService
from pr_reviewer.schemas.user import GetReviewsResponse, SetIsActiveRequest, UserResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/setIsActive", response_model=UserResponse)
async def set_is_active(
    body: SetIsActiveRequest,
    service: UserService = Depends(get_user_service),
):
    """Включить или выключить пользователя в выборе ревьюверов."""
    return await service.set_is_active(body.user_id, body.is_active)


@router.get("/getReview", response_model=GetReviewsResponse)
async def get_reviews(
    user_id: str = Query(..., min_length=1),
    service: UserService = Depends(get_user_service),
):
    """PR'ы, где пользователь сейчас числится ревьювером."""
    return await service.get_reviews(user_id)
