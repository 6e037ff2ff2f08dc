"""Submission-related Pydantic models."""
from datetime import datetime

from pydantic import BaseModel, Field


class ProgressSaveRequest(BaseModel):
    """Model for autosaving answers."""

    answers: dict[int, list[str]] = Field(default_factory=dict)


class SubmitRequest(BaseModel):
    """Model for the final submission."""

    answers: dict[int, list[str]] = Field(default_factory=dict)


class JoinResponse(BaseModel):
    message: str
    status: str
    startedAt: datetime


class ProgressResponse(BaseModel):
    """Model for autosave response."""

    message: str
    status: str
    lockedQuestions: list[int]
    lastSavedAt: datetime | None


class SubmitResponse(BaseModel):
    """Model for submission response."""

    message: str
    score: int
    submittedAt: datetime


class SubmissionResponse(BaseModel):
    """Attempt record as shown in history and leaderboard views."""

    id: int
    userId: int
    username: str | None = None
    contestId: int
    contestName: str | None = None
    status: str
    score: int | None
    startedAt: datetime
    lastSavedAt: datetime | None
    submittedAt: datetime | None
    answers: dict[int, list[str]] = Field(default_factory=dict)


class LeaderboardEntry(BaseModel):
    rank: int
    userId: int
    username: str
    score: int
    submittedAt: datetime


class LeaderboardResponse(BaseModel):
    contestId: int
    entries: list[LeaderboardEntry]


class HistoryResponse(BaseModel):
    """User history; admins get every attempt in ``all``."""

    message: str
    userId: int
    completed: list[SubmissionResponse] = Field(default_factory=list)
    inProgress: list[SubmissionResponse] = Field(default_factory=list)
    all: list[SubmissionResponse] | None = None
