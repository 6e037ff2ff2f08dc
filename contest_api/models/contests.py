"""Contest-related Pydantic models."""
from datetime import datetime

from pydantic import BaseModel, Field

from contest_api.models.db.contest import ContestType, QuestionType


class ContestCreate(BaseModel):
    """Model for creating a new contest."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    type: ContestType = ContestType.NORMAL
    prize: str | None = Field(None, max_length=200)
    startTime: datetime | None = None
    endTime: datetime | None = None


class ContestResponse(BaseModel):
    """Contest as listed to callers."""

    id: int
    name: str
    description: str | None
    type: str
    prize: str | None
    startTime: datetime | None
    endTime: datetime | None
    questionCount: int
    status: str | None = None


class QuestionCreate(BaseModel):
    """Model for adding a question to a contest."""

    text: str = Field(..., min_length=1)
    type: QuestionType = QuestionType.SINGLE
    options: list[str] = Field(..., min_length=1)
    correctAnswers: list[str] = Field(..., min_length=1)


class QuestionResponse(BaseModel):
    """Question as shown to callers; correct answers only for admins."""

    id: int
    contestId: int
    text: str
    type: str
    options: list[str]
    correctAnswers: list[str] | None = None
