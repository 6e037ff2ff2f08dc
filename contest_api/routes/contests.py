"""Contest, question and submission endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session as DbSession

from contest_api.database import get_db
from contest_api.dependencies import get_current_user, get_optional_user, require_admin
from contest_api.models import (
    ContestCreate,
    ContestResponse,
    JoinResponse,
    MessageResponse,
    ProgressResponse,
    ProgressSaveRequest,
    QuestionCreate,
    QuestionResponse,
    SubmitRequest,
    SubmitResponse,
)
from contest_api.models.db.user import User
from contest_api.routes.serializers import contest_to_response, question_to_response
from contest_api.services import contest_service, submission_service
from contest_api.utils import ensure_utc, validate_id

router = APIRouter(prefix="/api/contests", tags=["contests"])


@router.get("", response_model=list[ContestResponse])
def list_contests(
    db: Annotated[DbSession, Depends(get_db)],
    current_user: Annotated[User | None, Depends(get_optional_user)],
) -> list[ContestResponse]:
    """List contests visible to the caller, with the caller's status."""
    return [
        contest_to_response(contest, contest_status)
        for contest, contest_status in contest_service.list_contests(db, current_user)
    ]


@router.post("", response_model=ContestResponse, status_code=status.HTTP_201_CREATED)
def create_contest(
    data: ContestCreate,
    db: Annotated[DbSession, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
) -> ContestResponse:
    """Create a contest (admin only)."""
    contest = contest_service.create_contest(
        db,
        name=data.name,
        description=data.description,
        contest_type=data.type,
        prize=data.prize,
        start_time=data.startTime,
        end_time=data.endTime,
    )
    return contest_to_response(contest)


@router.get("/{contest_id}/questions", response_model=list[QuestionResponse])
def list_questions(
    contest_id: int,
    db: Annotated[DbSession, Depends(get_db)],
    current_user: Annotated[User | None, Depends(get_optional_user)],
) -> list[QuestionResponse]:
    """List questions of a contest; answers are only shown to admins."""
    contest_id = validate_id("contestId", contest_id)
    include_answers = current_user is not None and current_user.is_admin
    return [
        question_to_response(question, include_answers)
        for question in contest_service.list_questions(db, contest_id, current_user)
    ]


@router.post(
    "/{contest_id}/questions",
    response_model=QuestionResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_question(
    contest_id: int,
    data: QuestionCreate,
    db: Annotated[DbSession, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
) -> QuestionResponse:
    """Add a question to a contest (admin only)."""
    contest_id = validate_id("contestId", contest_id)
    question = contest_service.add_question(
        db,
        contest_id,
        text=data.text,
        question_type=data.type,
        options=data.options,
        correct_answers=data.correctAnswers,
    )
    return question_to_response(question, include_answers=True)


@router.delete("/questions/{question_id}", response_model=MessageResponse)
def delete_question(
    question_id: int,
    db: Annotated[DbSession, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
) -> MessageResponse:
    """Delete a question (admin only)."""
    question_id = validate_id("questionId", question_id)
    contest_service.delete_question(db, question_id)
    return MessageResponse(message="Question deleted successfully")


@router.post("/{contest_id}/join", response_model=JoinResponse)
def join_contest(
    contest_id: int,
    db: Annotated[DbSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> JoinResponse:
    """Join a contest; joining twice is harmless."""
    contest_id = validate_id("contestId", contest_id)
    submission, created = submission_service.join_contest(db, current_user, contest_id)
    return JoinResponse(
        message="Contest joined" if created else "Contest already in progress or completed",
        status=submission.status,
        startedAt=ensure_utc(submission.started_at),
    )


@router.post("/{contest_id}/progress", response_model=ProgressResponse)
def save_progress(
    contest_id: int,
    payload: ProgressSaveRequest,
    db: Annotated[DbSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProgressResponse:
    """Autosave answers; already answered questions stay locked."""
    contest_id = validate_id("contestId", contest_id)
    submission, locked_ids = submission_service.autosave_progress(
        db, current_user, contest_id, payload.answers
    )
    return ProgressResponse(
        message="Progress saved successfully",
        status=submission.status,
        lockedQuestions=locked_ids,
        lastSavedAt=ensure_utc(submission.last_saved_at),
    )


@router.post("/{contest_id}/submit", response_model=SubmitResponse)
def submit_contest(
    contest_id: int,
    payload: SubmitRequest,
    db: Annotated[DbSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> SubmitResponse:
    """Submit a contest and get the final score."""
    contest_id = validate_id("contestId", contest_id)
    submission = submission_service.submit_contest(
        db, current_user, contest_id, payload.answers
    )
    return SubmitResponse(
        message="Contest submitted successfully",
        score=submission.score,
        submittedAt=ensure_utc(submission.submitted_at),
    )
