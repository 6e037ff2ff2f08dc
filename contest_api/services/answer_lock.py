"""Write-once answer locking.

An answer, once accepted for a question, belongs to the submission for good:
later proposals for the same question are dropped and keys are never removed.
"""
import json
from collections.abc import Mapping, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session as DBSession

from contest_api.models.db.submission import SubmissionAnswer
from contest_api.utils import insert_if_absent, utc_now


def merge_locked_answers(
    locked: Mapping[int, Sequence[str]],
    proposed: Mapping[int, Sequence[str]],
) -> dict[int, list[str]]:
    """Merge proposed answers into locked ones; locked values always win."""
    merged = {question_id: list(selection) for question_id, selection in locked.items()}
    for question_id, selection in proposed.items():
        if question_id not in merged:
            merged[question_id] = list(selection)
    return merged


def lock_answers(
    db: DBSession,
    submission_id: int,
    proposed: Mapping[int, Sequence[str]],
) -> list[int]:
    """
    Persist proposed answers for questions not yet locked.

    Every question is locked by its own insert-if-absent, so concurrent
    callers with disjoint questions never lose writes and callers racing on
    the same question cannot both win. Returns the newly locked ids.
    """
    now = utc_now()
    newly_locked: list[int] = []
    for question_id, selection in proposed.items():
        inserted = insert_if_absent(
            db,
            SubmissionAnswer.__table__,
            {
                "submission_id": submission_id,
                "question_id": question_id,
                "selected_json": json.dumps(list(selection)),
                "locked_at": now,
            },
            index_elements=["submission_id", "question_id"],
        )
        if inserted:
            newly_locked.append(question_id)
    return newly_locked


def load_locked_answers(db: DBSession, submission_id: int) -> dict[int, list[str]]:
    """Read the locked answers of a submission."""
    rows = db.execute(
        select(SubmissionAnswer)
        .where(SubmissionAnswer.submission_id == submission_id)
        .order_by(SubmissionAnswer.id)
    ).scalars().all()
    return {row.question_id: row.selected for row in rows}
