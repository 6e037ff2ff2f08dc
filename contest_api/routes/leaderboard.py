"""Leaderboard endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session as DbSession

from contest_api.database import get_db
from contest_api.dependencies import get_current_user, require_admin
from contest_api.models import LeaderboardEntry, LeaderboardResponse, MessageResponse
from contest_api.models.db.user import User
from contest_api.routes.serializers import leaderboard_entry
from contest_api.services import leaderboard_service
from contest_api.utils import validate_id

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


@router.get("/{contest_id}", response_model=LeaderboardResponse)
def get_leaderboard(
    contest_id: int,
    db: Annotated[DbSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    limit: Annotated[int | None, Query(ge=1, le=1000)] = None,
) -> LeaderboardResponse:
    """Ranked submitted results of a contest."""
    contest_id = validate_id("contestId", contest_id)
    ranked = leaderboard_service.get_leaderboard(db, contest_id, current_user, limit)
    return LeaderboardResponse(
        contestId=contest_id,
        entries=[leaderboard_entry(rank, submission) for rank, submission in ranked],
    )


@router.get("/{contest_id}/top", response_model=LeaderboardEntry)
def get_top_scorer(
    contest_id: int,
    db: Annotated[DbSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> LeaderboardEntry:
    """Best result of a contest."""
    contest_id = validate_id("contestId", contest_id)
    submission = leaderboard_service.get_top_scorer(db, contest_id, current_user)
    return leaderboard_entry(1, submission)


@router.delete("/{submission_id}", response_model=MessageResponse)
def delete_result(
    submission_id: int,
    db: Annotated[DbSession, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
) -> MessageResponse:
    """Delete a result (admin only)."""
    submission_id = validate_id("submissionId", submission_id)
    leaderboard_service.delete_result(db, submission_id)
    return MessageResponse(message="Result deleted successfully")
