import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from collections.abc import Iterator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from contest_api.database import get_db, init_db  # noqa: E402
from contest_api.models.db.contest import Contest, Question  # noqa: E402
from contest_api.models.db.user import User, UserRole  # noqa: E402
from contest_api.services import contest_service  # noqa: E402
from contest_api.services.auth_service import hash_password  # noqa: E402


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory: sessionmaker) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def make_user(
    db: Session, username: str, role: UserRole = UserRole.NORMAL, password: str = "secret123"
) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=hash_password(password),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_contest(db: Session, **kwargs) -> tuple[Contest, Question, Question]:
    """Contest with Q1 (SINGLE, correct B) and Q2 (MULTI, correct A and C)."""
    contest = contest_service.create_contest(db, name=kwargs.pop("name", "Weekly quiz"), **kwargs)
    q1 = contest_service.add_question(
        db, contest.id, "Pick B", "SINGLE", ["A", "B", "C"], ["B"]
    )
    q2 = contest_service.add_question(
        db, contest.id, "Pick A and C", "MULTI", ["A", "B", "C", "D"], ["A", "C"]
    )
    return contest, q1, q2


@pytest.fixture()
def user_factory(db: Session):
    def _create(username: str, role: UserRole = UserRole.NORMAL) -> User:
        return make_user(db, username, role)

    return _create


@pytest.fixture()
def quiz_factory(db: Session):
    def _create(**kwargs) -> tuple[Contest, Question, Question]:
        return make_contest(db, **kwargs)

    return _create


@pytest.fixture()
def user(db: Session) -> User:
    return make_user(db, "alice")


@pytest.fixture()
def quiz(db: Session) -> tuple[Contest, Question, Question]:
    return make_contest(db)


@pytest.fixture()
def client(session_factory: sessionmaker) -> Iterator[TestClient]:
    from contest_api.app import app

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
