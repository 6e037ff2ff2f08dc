"""User listing and history routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session as DbSession

from contest_api.database import get_db
from contest_api.dependencies import get_current_user, require_admin
from contest_api.models import HistoryResponse, UserResponse
from contest_api.models.db.user import User
from contest_api.routes.serializers import submission_to_response
from contest_api.services import leaderboard_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
def list_users(
    db: Annotated[DbSession, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
) -> list[User]:
    """List all users (admin only)."""
    return leaderboard_service.list_users(db)


@router.get("/history", response_model=HistoryResponse)
def get_history(
    db: Annotated[DbSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    user_id: Annotated[int | None, Query(alias="userId", ge=1)] = None,
) -> HistoryResponse:
    """Contest history; admins see everyone's unless ``userId`` is given."""
    submissions = leaderboard_service.get_user_history(db, current_user, user_id)
    completed, in_progress = leaderboard_service.split_history(submissions)

    response = HistoryResponse(
        message="User contest history fetched successfully",
        userId=user_id or current_user.id,
        completed=[submission_to_response(item) for item in completed],
        inProgress=[submission_to_response(item) for item in in_progress],
    )
    if current_user.is_admin and user_id is None:
        response.message = "All users' histories fetched successfully"
        response.all = [submission_to_response(item) for item in submissions]
    return response
