"""
Submission (attempt) and locked answer database models.
"""

from __future__ import annotations

import enum
import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contest_api.database import Base

if TYPE_CHECKING:
    from contest_api.models.db.contest import Contest
    from contest_api.models.db.user import User


class SubmissionStatus(str, enum.Enum):
    """Status of a contest attempt."""

    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


class Submission(Base):
    """
    One user's attempt at one contest.
    At most one row exists per (user, contest).
    """

    __tablename__ = "submissions"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # References
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    contest_id: Mapped[int] = mapped_column(
        ForeignKey("contests.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Timing
    started_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    last_saved_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    submitted_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )

    # Status and result
    status: Mapped[str] = mapped_column(
        String(20), default=SubmissionStatus.IN_PROGRESS.value, nullable=False
    )
    score: Mapped[int | None] = mapped_column(nullable=True)
    # Answers the score was computed from, frozen on submit
    scored_answers_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "contest_id", name="uq_submission_user_contest"),
    )

    # Relationships
    user: Mapped["User"] = relationship("User")
    contest: Mapped["Contest"] = relationship("Contest")
    answers: Mapped[list["SubmissionAnswer"]] = relationship(
        "SubmissionAnswer",
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="SubmissionAnswer.id",
    )

    @property
    def is_submitted(self) -> bool:
        return self.status == SubmissionStatus.SUBMITTED.value

    @property
    def locked_answers(self) -> dict[int, list[str]]:
        """Locked answers keyed by question id."""
        return {answer.question_id: answer.selected for answer in self.answers}

    @property
    def scored_answers(self) -> dict[int, list[str]] | None:
        """Answers the frozen score was computed from, or None before submit."""
        if self.scored_answers_json is None:
            return None
        try:
            value = json.loads(self.scored_answers_json)
        except (json.JSONDecodeError, TypeError):
            return None
        if not isinstance(value, dict):
            return None
        return {int(key): [str(item) for item in items] for key, items in value.items()}

    @property
    def reported_answers(self) -> dict[int, list[str]]:
        """Scored answers once submitted, the locked answers before that."""
        scored = self.scored_answers
        return scored if scored is not None else self.locked_answers


class SubmissionAnswer(Base):
    """
    Locked answer for one question within a submission.
    Written once; the unique constraint makes the insert an atomic lock.
    """

    __tablename__ = "submission_answers"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id: Mapped[int] = mapped_column(nullable=False)
    selected_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    locked_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("submission_id", "question_id", name="uq_submission_question"),
    )

    # Relationships
    submission: Mapped["Submission"] = relationship("Submission", back_populates="answers")

    @property
    def selected(self) -> list[str]:
        """Parse selected option tokens from JSON."""
        try:
            value = json.loads(self.selected_json)
        except (json.JSONDecodeError, TypeError):
            return []
        return [str(item) for item in value] if isinstance(value, list) else []

    @selected.setter
    def selected(self, value: list[str]) -> None:
        self.selected_json = json.dumps(list(value))
