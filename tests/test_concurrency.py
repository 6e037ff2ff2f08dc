from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from contest_api.database import init_db
from contest_api.errors import InvalidStateError
from contest_api.models.db.submission import Submission
from contest_api.models.db.user import User, UserRole
from contest_api.services import contest_service, submission_service
from contest_api.services.answer_lock import load_locked_answers
from contest_api.services.auth_service import hash_password

WORKERS = 8


@pytest.fixture()
def file_sessions(tmp_path: Path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'contests.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def seeded(file_sessions):
    db = file_sessions()
    try:
        user = User(
            username="racer",
            email="racer@example.com",
            hashed_password=hash_password("secret123"),
            role=UserRole.NORMAL.value,
        )
        db.add(user)
        db.commit()
        contest = contest_service.create_contest(db, name="Race")
        question_ids = [
            contest_service.add_question(
                db, contest.id, f"Question {index}", "SINGLE", ["A", "B"], ["A"]
            ).id
            for index in range(WORKERS)
        ]
        return user.id, contest.id, question_ids
    finally:
        db.close()


def _autosave(file_sessions, user_id: int, contest_id: int, answers: dict[int, list[str]]):
    db = file_sessions()
    try:
        user = db.get(User, user_id)
        _, locked = submission_service.autosave_progress(db, user, contest_id, answers)
        return locked
    finally:
        db.close()


def test_concurrent_disjoint_autosaves_lose_no_writes(file_sessions, seeded, monkeypatch) -> None:
    monkeypatch.setattr(submission_service, "MAX_WRITE_RETRIES", 50)
    monkeypatch.setattr(submission_service, "WRITE_RETRY_BACKOFF_MS", 5)
    user_id, contest_id, question_ids = seeded

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        futures = [
            pool.submit(_autosave, file_sessions, user_id, contest_id, {question_id: ["A"]})
            for question_id in question_ids
        ]
        results = [future.result() for future in futures]

    for question_id, locked in zip(question_ids, results):
        assert question_id in locked

    db = file_sessions()
    try:
        submissions = db.query(Submission).all()
        assert len(submissions) == 1
        locked = load_locked_answers(db, submissions[0].id)
        assert sorted(locked) == sorted(question_ids)
    finally:
        db.close()


def test_concurrent_writers_on_same_question_only_one_wins(
    file_sessions, seeded, monkeypatch
) -> None:
    monkeypatch.setattr(submission_service, "MAX_WRITE_RETRIES", 50)
    monkeypatch.setattr(submission_service, "WRITE_RETRY_BACKOFF_MS", 5)
    user_id, contest_id, question_ids = seeded
    target = question_ids[0]
    proposals = [["A"] if index % 2 else ["B"] for index in range(WORKERS)]

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        futures = [
            pool.submit(_autosave, file_sessions, user_id, contest_id, {target: proposal})
            for proposal in proposals
        ]
        for future in futures:
            future.result()

    db = file_sessions()
    try:
        submission = db.query(Submission).one()
        locked = load_locked_answers(db, submission.id)
        assert list(locked) == [target]
        assert locked[target] in (["A"], ["B"])
    finally:
        db.close()


def _autosave_unless_submitted(file_sessions, user_id: int, contest_id: int, answers):
    try:
        return _autosave(file_sessions, user_id, contest_id, answers)
    except InvalidStateError:
        return None


def _submit(file_sessions, user_id: int, contest_id: int) -> int:
    db = file_sessions()
    try:
        user = db.get(User, user_id)
        return submission_service.submit_contest(db, user, contest_id, {}).score
    finally:
        db.close()


def test_submit_racing_autosaves_scores_every_locked_answer(
    file_sessions, seeded, monkeypatch
) -> None:
    monkeypatch.setattr(submission_service, "MAX_WRITE_RETRIES", 50)
    monkeypatch.setattr(submission_service, "WRITE_RETRY_BACKOFF_MS", 5)
    user_id, contest_id, question_ids = seeded
    _autosave(file_sessions, user_id, contest_id, {question_ids[0]: ["A"]})

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        saves = [
            pool.submit(
                _autosave_unless_submitted,
                file_sessions,
                user_id,
                contest_id,
                {question_id: ["A"]},
            )
            for question_id in question_ids[1:]
        ]
        submitted = pool.submit(_submit, file_sessions, user_id, contest_id)
        for future in saves:
            future.result()
        score = submitted.result()

    db = file_sessions()
    try:
        submission = db.query(Submission).one()
        locked = load_locked_answers(db, submission.id)
        # Every question is answered correctly, so the score counts locked answers
        assert submission.scored_answers == locked
        assert submission.score == score == len(locked)
    finally:
        db.close()
