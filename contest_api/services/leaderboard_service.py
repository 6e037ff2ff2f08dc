"""Read views over submitted results: leaderboard, top scorer and history."""
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session as DBSession, joinedload, selectinload

from contest_api.errors import NotFoundError, PermissionDeniedError
from contest_api.models.db.submission import Submission, SubmissionStatus
from contest_api.models.db.user import User
from contest_api.services.access_service import policy_for_user
from contest_api.services.contest_service import get_visible_contest

logger = logging.getLogger(__name__)


def get_leaderboard(
    db: DBSession,
    contest_id: int,
    viewer: User | None,
    limit: int | None = None,
) -> list[tuple[int, Submission]]:
    """
    Rank submitted attempts of a contest.

    Higher scores rank first; ties go to the earlier submission.
    """
    contest = get_visible_contest(db, contest_id, policy_for_user(viewer))
    query = (
        select(Submission)
        .options(joinedload(Submission.user))
        .where(
            Submission.contest_id == contest.id,
            Submission.status == SubmissionStatus.SUBMITTED.value,
        )
        .order_by(
            Submission.score.desc(),
            Submission.submitted_at.asc(),
            Submission.id.asc(),
        )
    )
    if limit:
        query = query.limit(limit)
    submissions = db.execute(query).scalars().all()
    return [(rank, submission) for rank, submission in enumerate(submissions, start=1)]


def get_top_scorer(db: DBSession, contest_id: int, viewer: User | None) -> Submission:
    """Get the best submission of a contest."""
    ranked = get_leaderboard(db, contest_id, viewer, limit=1)
    if not ranked:
        raise NotFoundError("No submissions for this contest")
    return ranked[0][1]


def get_user_history(
    db: DBSession, viewer: User, owner_id: int | None = None
) -> list[Submission]:
    """
    Get attempts visible to the viewer, newest submission first.

    Admins without an explicit owner get every user's attempts.
    """
    policy = policy_for_user(viewer)
    query = select(Submission).options(
        joinedload(Submission.contest),
        joinedload(Submission.user),
        selectinload(Submission.answers),
    )

    if owner_id is None and policy.sees_all_histories():
        pass
    else:
        owner_id = viewer.id if owner_id is None else owner_id
        if not policy.can_view_history_of(viewer.id, owner_id):
            raise PermissionDeniedError("Not allowed to view this history")
        query = query.where(Submission.user_id == owner_id)

    query = query.order_by(
        Submission.submitted_at.desc().nulls_last(),
        Submission.started_at.desc(),
    )
    return list(db.execute(query).unique().scalars().all())


def split_history(
    submissions: list[Submission],
) -> tuple[list[Submission], list[Submission]]:
    """Split attempts into (completed, in progress)."""
    completed = [item for item in submissions if item.is_submitted]
    in_progress = [item for item in submissions if not item.is_submitted]
    return completed, in_progress


def delete_result(db: DBSession, submission_id: int) -> None:
    """Delete a submission and its answers (admin only)."""
    submission = db.get(Submission, submission_id)
    if submission is None:
        raise NotFoundError("Result not found")
    db.delete(submission)
    db.commit()
    logger.info(f"Deleted result {submission_id}")


def list_users(db: DBSession) -> list[User]:
    """List every user (admin only)."""
    return list(db.execute(select(User).order_by(User.id)).scalars().all())
