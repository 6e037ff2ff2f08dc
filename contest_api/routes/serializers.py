"""Conversion of database rows to response models."""
from contest_api.models import (
    ContestResponse,
    LeaderboardEntry,
    QuestionResponse,
    SubmissionResponse,
)
from contest_api.models.db.contest import Contest, Question
from contest_api.models.db.submission import Submission
from contest_api.utils import ensure_utc


def contest_to_response(contest: Contest, status: str | None = None) -> ContestResponse:
    return ContestResponse(
        id=contest.id,
        name=contest.name,
        description=contest.description,
        type=contest.type,
        prize=contest.prize,
        startTime=ensure_utc(contest.start_time),
        endTime=ensure_utc(contest.end_time),
        questionCount=len(contest.questions),
        status=status,
    )


def question_to_response(question: Question, include_answers: bool) -> QuestionResponse:
    """Correct answers are only exposed when ``include_answers`` is set."""
    return QuestionResponse(
        id=question.id,
        contestId=question.contest_id,
        text=question.text,
        type=question.type,
        options=question.options,
        correctAnswers=question.correct_answers if include_answers else None,
    )


def submission_to_response(submission: Submission) -> SubmissionResponse:
    return SubmissionResponse(
        id=submission.id,
        userId=submission.user_id,
        username=submission.user.username if submission.user else None,
        contestId=submission.contest_id,
        contestName=submission.contest.name if submission.contest else None,
        status=submission.status,
        score=submission.score,
        startedAt=ensure_utc(submission.started_at),
        lastSavedAt=ensure_utc(submission.last_saved_at),
        submittedAt=ensure_utc(submission.submitted_at),
        answers=submission.reported_answers,
    )


def leaderboard_entry(rank: int, submission: Submission) -> LeaderboardEntry:
    return LeaderboardEntry(
        rank=rank,
        userId=submission.user_id,
        username=submission.user.username,
        score=submission.score or 0,
        submittedAt=ensure_utc(submission.submitted_at),
    )
