"""
Contest and Question database models.
"""

from __future__ import annotations

import enum
import json
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contest_api.database import Base


class ContestType(str, enum.Enum):
    """Visibility tier of a contest."""

    NORMAL = "NORMAL"
    VIP = "VIP"


class QuestionType(str, enum.Enum):
    """Answer shape of a question."""

    SINGLE = "SINGLE"  # Exactly one correct option
    MULTI = "MULTI"  # Set of correct options, all required


def _load_string_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return []
    return [str(item) for item in value] if isinstance(value, list) else []


class Contest(Base):
    """
    Timed contest made of multiple-choice questions.
    The time window is only enforced when ENFORCE_CONTEST_WINDOW is set.
    """

    __tablename__ = "contests"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(
        String(20), default=ContestType.NORMAL.value, nullable=False
    )
    prize: Mapped[str | None] = mapped_column(String(200), nullable=True)
    start_time: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    end_time: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    questions: Mapped[list["Question"]] = relationship(
        "Question",
        back_populates="contest",
        cascade="all, delete-orphan",
        order_by="Question.id",
    )


class Question(Base):
    """
    Question belonging to a contest.
    Options and correct answers are stored as JSON lists of labels.
    """

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    contest_id: Mapped[int] = mapped_column(
        ForeignKey("contests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(
        String(20), default=QuestionType.SINGLE.value, nullable=False
    )
    options_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    correct_answers_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    # Relationships
    contest: Mapped["Contest"] = relationship("Contest", back_populates="questions")

    @property
    def options(self) -> list[str]:
        """Parse option labels from JSON."""
        return _load_string_list(self.options_json)

    @options.setter
    def options(self, value: list[str]) -> None:
        self.options_json = json.dumps(list(value))

    @property
    def correct_answers(self) -> list[str]:
        """Parse correct answer tokens from JSON."""
        return _load_string_list(self.correct_answers_json)

    @correct_answers.setter
    def correct_answers(self, value: list[str]) -> None:
        self.correct_answers_json = json.dumps(list(value))
