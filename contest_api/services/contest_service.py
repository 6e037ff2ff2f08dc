"""Service layer for contests and questions."""
import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session as DBSession, selectinload

from contest_api.errors import InvalidInputError, NotFoundError
from contest_api.models.db.contest import Contest, ContestType, Question, QuestionType
from contest_api.models.db.submission import Submission
from contest_api.models.db.user import User
from contest_api.services.access_service import VisibilityPolicy, policy_for_user
from contest_api.utils import ensure_utc

logger = logging.getLogger(__name__)

NOT_STARTED = "not-started"


def create_contest(
    db: DBSession,
    name: str,
    description: str | None = None,
    contest_type: ContestType | str = ContestType.NORMAL,
    prize: str | None = None,
    start_time: datetime | None = None,
    end_time: datetime | None = None,
) -> Contest:
    """Create a new contest (admin only)."""
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("name is required")
    try:
        contest_type = ContestType(contest_type)
    except ValueError:
        raise InvalidInputError(f"Invalid contest type: {contest_type}") from None

    start_time = ensure_utc(start_time)
    end_time = ensure_utc(end_time)
    if start_time and end_time and end_time <= start_time:
        raise InvalidInputError("endTime must be after startTime")

    contest = Contest(
        name=name,
        description=description,
        type=contest_type.value,
        prize=prize,
        start_time=start_time,
        end_time=end_time,
    )
    db.add(contest)
    db.commit()
    db.refresh(contest)
    logger.info(f"Created contest {contest.id} ({contest.type})")
    return contest


def get_contest(db: DBSession, contest_id: int) -> Contest:
    """Get contest with its questions, raising NotFoundError if missing."""
    contest = db.execute(
        select(Contest)
        .options(selectinload(Contest.questions))
        .where(Contest.id == contest_id)
    ).scalar_one_or_none()
    if contest is None:
        raise NotFoundError("Contest not found")
    return contest


def get_visible_contest(
    db: DBSession, contest_id: int, policy: VisibilityPolicy
) -> Contest:
    """Get contest if the caller's policy lets them see it.

    Hidden contests are reported as missing.
    """
    contest = get_contest(db, contest_id)
    if not policy.can_view_contest(contest):
        raise NotFoundError("Contest not found")
    return contest


def list_contests(
    db: DBSession, user: User | None
) -> list[tuple[Contest, str | None]]:
    """
    List contests visible to the caller.

    Logged-in callers get their own attempt status for each contest
    (``not-started`` when they have none); guests get ``None``.
    """
    policy = policy_for_user(user)
    query = policy.filter_contests(
        select(Contest).options(selectinload(Contest.questions))
    ).order_by(Contest.id)
    contests = list(db.execute(query).scalars().all())

    if user is None:
        return [(contest, None) for contest in contests]

    statuses = dict(
        db.execute(
            select(Submission.contest_id, Submission.status).where(
                Submission.user_id == user.id
            )
        ).all()
    )
    return [(contest, statuses.get(contest.id, NOT_STARTED)) for contest in contests]


def _validate_question(
    question_type: QuestionType | str,
    options: list[str],
    correct_answers: list[str],
) -> QuestionType:
    try:
        question_type = QuestionType(question_type)
    except ValueError:
        raise InvalidInputError(f"Invalid question type: {question_type}") from None

    if not options or any(not str(option).strip() for option in options):
        raise InvalidInputError("options must be non-empty labels")
    if len(set(options)) != len(options):
        raise InvalidInputError("options must be unique")
    if not correct_answers:
        raise InvalidInputError("correctAnswers must not be empty")
    if len(set(correct_answers)) != len(correct_answers):
        raise InvalidInputError("correctAnswers must be unique")
    unknown = [answer for answer in correct_answers if answer not in options]
    if unknown:
        raise InvalidInputError(f"correctAnswers not among options: {unknown}")
    if question_type == QuestionType.SINGLE and len(correct_answers) != 1:
        raise InvalidInputError("SINGLE questions need exactly one correct answer")
    return question_type


def add_question(
    db: DBSession,
    contest_id: int,
    text: str,
    question_type: QuestionType | str,
    options: list[str],
    correct_answers: list[str],
) -> Question:
    """Add a question to a contest (admin only)."""
    contest = get_contest(db, contest_id)
    text = (text or "").strip()
    if not text:
        raise InvalidInputError("text is required")
    question_type = _validate_question(question_type, options, correct_answers)

    question = Question(contest_id=contest.id, text=text, type=question_type.value)
    question.options = options
    question.correct_answers = correct_answers
    db.add(question)
    db.commit()
    db.refresh(question)
    logger.info(f"Added question {question.id} to contest {contest.id}")
    return question


def list_questions(
    db: DBSession, contest_id: int, user: User | None
) -> list[Question]:
    """List questions of a contest visible to the caller."""
    contest = get_visible_contest(db, contest_id, policy_for_user(user))
    return list(contest.questions)


def delete_question(db: DBSession, question_id: int) -> None:
    """Delete a question (admin only)."""
    question = db.get(Question, question_id)
    if question is None:
        raise NotFoundError("Question not found")
    db.delete(question)
    db.commit()
    logger.info(f"Deleted question {question_id}")
