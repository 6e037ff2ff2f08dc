"""Service layer for contest submissions.

A submission moves from absent to in_progress (join or first autosave) and
then to submitted (terminal). Autosave only ever adds locked answers; submit
freezes the score exactly once.
"""
import json
import logging
import time
from collections.abc import Callable, Mapping, Sequence
from typing import TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session as DBSession

from contest_api.config import (
    ENFORCE_CONTEST_WINDOW,
    MAX_WRITE_RETRIES,
    SCORE_LOCKED_ANSWERS,
    WRITE_RETRY_BACKOFF_MS,
)
from contest_api.errors import (
    ConcurrencyConflictError,
    InvalidStateError,
    NotFoundError,
)
from contest_api.models.db.contest import Contest
from contest_api.models.db.submission import Submission, SubmissionStatus
from contest_api.models.db.user import User
from contest_api.services.access_service import policy_for_user
from contest_api.services.answer_lock import lock_answers, load_locked_answers
from contest_api.services.contest_service import get_contest
from contest_api.services.scoring_service import calculate_score
from contest_api.utils import ensure_utc, insert_if_absent, utc_now, validate_answers

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _run_write(db: DBSession, operation: Callable[[DBSession], T]) -> T:
    """
    Run a read-merge-write sequence in one transaction and commit it.

    Transient storage conflicts roll back and repeat the whole sequence;
    any other error rolls back and propagates untouched.
    """
    attempts = max(1, MAX_WRITE_RETRIES)
    attempt = 0
    while True:
        attempt += 1
        try:
            result = operation(db)
            db.commit()
            return result
        except OperationalError as exc:
            db.rollback()
            if attempt == attempts:
                logger.error(f"Giving up after {attempts} conflicting writes: {exc}")
                raise ConcurrencyConflictError(
                    "Submission is being updated concurrently, try again"
                ) from exc
            logger.warning(f"Write conflict (attempt {attempt}/{attempts}), retrying")
            time.sleep(WRITE_RETRY_BACKOFF_MS / 1000 * attempt)
        except Exception:
            db.rollback()
            raise


def _check_window(contest: Contest) -> None:
    """Reject work on a contest outside its start/end time."""
    if not ENFORCE_CONTEST_WINDOW:
        return
    now = utc_now()
    start_time = ensure_utc(contest.start_time)
    end_time = ensure_utc(contest.end_time)
    if start_time is not None and now < start_time:
        raise InvalidStateError("Contest has not started yet")
    if end_time is not None and now > end_time:
        raise InvalidStateError("Contest has ended")


def _load_joinable_contest(db: DBSession, user: User, contest_id: int) -> Contest:
    contest = get_contest(db, contest_id)
    if not policy_for_user(user).can_join_contest(contest):
        raise NotFoundError("Contest not found")
    _check_window(contest)
    return contest


def create_attempt_if_absent(
    db: DBSession, user_id: int, contest_id: int, lock: bool = False
) -> tuple[Submission, bool]:
    """
    Create an in-progress submission unless the pair already has one.

    With ``lock`` the submission row is selected FOR UPDATE, so writers on the
    same pair serialize until commit. Does not commit. Returns the submission
    and whether it was created here.
    """
    created = insert_submission_if_absent(db, user_id, contest_id)
    query = (
        select(Submission)
        .where(
            Submission.user_id == user_id,
            Submission.contest_id == contest_id,
        )
        .execution_options(populate_existing=True)
    )
    if lock:
        query = query.with_for_update()
    submission = db.execute(query).scalar_one()
    return submission, created


def insert_submission_if_absent(db: DBSession, user_id: int, contest_id: int) -> bool:
    return insert_if_absent(
        db,
        Submission.__table__,
        {
            "user_id": user_id,
            "contest_id": contest_id,
            "status": SubmissionStatus.IN_PROGRESS.value,
            "started_at": utc_now(),
        },
        index_elements=["user_id", "contest_id"],
    )


def join_contest(db: DBSession, user: User, contest_id: int) -> tuple[Submission, bool]:
    """
    Join a contest.

    Joining again returns the existing submission unchanged, whatever its
    status. Returns the submission and whether it was created by this call.
    """
    contest = _load_joinable_contest(db, user, contest_id)
    submission, created = _run_write(
        db, lambda session: create_attempt_if_absent(session, user.id, contest.id)
    )
    if created:
        logger.info(f"User {user.id} joined contest {contest_id}")
    return submission, created


def autosave_progress(
    db: DBSession,
    user: User,
    contest_id: int,
    proposed_answers: Mapping[int, Sequence[str]],
) -> tuple[Submission, list[int]]:
    """
    Lock answers for questions that have none yet.

    Answers for already locked questions are silently discarded. Creates the
    submission when the user has not joined yet. Returns the submission and
    every locked question id.

    Raises:
        InvalidStateError: the submission was already submitted.
    """
    contest = _load_joinable_contest(db, user, contest_id)
    proposed = validate_answers(
        proposed_answers, {question.id for question in contest.questions}
    )

    def _autosave(session: DBSession) -> Submission:
        submission, _ = create_attempt_if_absent(
            session, user.id, contest_id, lock=True
        )
        if submission.is_submitted:
            raise InvalidStateError("Contest already submitted")

        lock_answers(session, submission.id, proposed)
        result = session.execute(
            update(Submission)
            .where(
                Submission.id == submission.id,
                Submission.status == SubmissionStatus.IN_PROGRESS.value,
            )
            .values(last_saved_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InvalidStateError("Contest already submitted")
        return submission

    submission = _run_write(db, _autosave)
    locked_ids = sorted(load_locked_answers(db, submission.id))
    logger.debug(f"User {user.id} saved progress in contest {contest_id}: {locked_ids}")
    return submission, locked_ids


def finalize_attempt(
    db: DBSession,
    submission: Submission,
    contest: Contest,
    final_answers: Mapping[int, Sequence[str]],
) -> Submission:
    """
    Score a submission and move it to submitted.

    Final answers go through the same lock rule as autosave. The score is
    computed from the locked answers unless SCORE_LOCKED_ANSWERS is off, in
    which case the final answers are scored as given. Whichever mapping is
    scored is stored on the submission next to the score.

    The caller must hold the submission row lock (see
    ``create_attempt_if_absent``) so no autosave can lock an answer between
    reading the locked answers and freezing the score. Does not commit.

    Raises:
        InvalidStateError: the submission was already submitted.
    """
    if submission.is_submitted:
        raise InvalidStateError("Contest already submitted")

    lock_answers(db, submission.id, final_answers)
    if SCORE_LOCKED_ANSWERS:
        scored_answers = load_locked_answers(db, submission.id)
    else:
        scored_answers = {
            question_id: list(selection) for question_id, selection in final_answers.items()
        }
    score = calculate_score(contest.questions, scored_answers)

    now = utc_now()
    result = db.execute(
        update(Submission)
        .where(
            Submission.id == submission.id,
            Submission.status == SubmissionStatus.IN_PROGRESS.value,
        )
        .values(
            status=SubmissionStatus.SUBMITTED.value,
            score=score,
            scored_answers_json=json.dumps(
                {str(question_id): selection for question_id, selection in scored_answers.items()}
            ),
            submitted_at=now,
            last_saved_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise InvalidStateError("Contest already submitted")
    return submission


def submit_contest(
    db: DBSession,
    user: User,
    contest_id: int,
    final_answers: Mapping[int, Sequence[str]],
) -> Submission:
    """Submit a contest and freeze its score."""
    contest = _load_joinable_contest(db, user, contest_id)
    answers = validate_answers(
        final_answers, {question.id for question in contest.questions}
    )

    def _submit(session: DBSession) -> Submission:
        submission, _ = create_attempt_if_absent(
            session, user.id, contest.id, lock=True
        )
        return finalize_attempt(session, submission, contest, answers)

    submission = _run_write(db, _submit)
    db.refresh(submission)
    logger.info(
        f"User {user.id} submitted contest {contest_id} with score {submission.score}"
    )
    return submission
