"""Database models."""
from contest_api.models.db.user import User, Session, UserRole
from contest_api.models.db.contest import Contest, ContestType, Question, QuestionType
from contest_api.models.db.submission import Submission, SubmissionAnswer, SubmissionStatus

__all__ = [
    "User",
    "Session",
    "UserRole",
    "Contest",
    "ContestType",
    "Question",
    "QuestionType",
    "Submission",
    "SubmissionAnswer",
    "SubmissionStatus",
]
