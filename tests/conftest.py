# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-quorum-stage")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from quorum_stage.core.security import create_access_token, hash_password
from quorum_stage.db.session import Base
from quorum_stage.db.session import get_db as app_get_session
from quorum_stage.main import app as fastapi_app
from quorum_stage.models import Answer, Question, QuestionTag, User
from quorum_stage.models.user import ROLE_ADMIN, ROLE_USER

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct-horse-battery"

_EMAIL_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

        # Services commit, so each test wipes the tables afterwards.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users."""

    def _make_user(
        name: str = "User",
        *,
        role: str = ROLE_USER,
        reputation: int = 0,
        password: str | None = None,
    ) -> User:
        user = User(
            name=name,
            email=f"user{next(_EMAIL_COUNTER)}@example.com",
            role=role,
            reputation=reputation,
            password_hash=hash_password(password) if password else None,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user("Test User", password=TEST_PASSWORD)


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second user."""
    return make_user("Other User")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    """Create and return an admin."""
    return make_user("Admin User", role=ROLE_ADMIN)


def auth_headers(user: User) -> dict[str, str]:
    """Build bearer headers for a user."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Expose ``auth_headers`` to tests that create extra users."""
    return auth_headers


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def admin_auth_token(admin_user: User) -> dict[str, str]:
    """Return authorization headers for the admin."""
    return auth_headers(admin_user)


@pytest.fixture()
def make_question(db_session: Session) -> Callable[..., Question]:
    """Return a factory that persists questions."""

    def _make_question(
        author: User,
        title: str = "How do I reverse a list?",
        *,
        tags: tuple[str, ...] = ("python",),
        **fields,
    ) -> Question:
        question = Question(
            title=title,
            content="Looking for the idiomatic way.",
            author_id=author.id,
            **fields,
        )
        question.tag_rows = [QuestionTag(tag=tag, position=i) for i, tag in enumerate(tags)]
        db_session.add(question)
        db_session.commit()
        db_session.refresh(question)
        return question

    return _make_question


@pytest.fixture()
def make_answer(db_session: Session) -> Callable[..., Answer]:
    """Return a factory that persists answers."""

    def _make_answer(question: Question, author: User, content: str = "Use reversed().", **fields) -> Answer:
        answer = Answer(question_id=question.id, author_id=author.id, content=content, **fields)
        db_session.add(answer)
        db_session.commit()
        db_session.refresh(answer)
        return answer

    return _make_answer


@pytest.fixture()
def test_question(make_question: Callable[..., Question], test_user: User) -> Question:
    """A question authored by the primary test user."""
    return make_question(test_user)


@pytest.fixture()
def test_answer(
    make_answer: Callable[..., Answer],
    test_question: Question,
    other_user: User,
) -> Answer:
    """An answer by the secondary user on the primary user's question."""
    return make_answer(test_question, other_user)
