# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from microblog.core.security import create_access_token, hash_identity  # noqa: E402
from microblog.db.session import Base  # noqa: E402
from microblog.db.session import get_db as app_get_session  # noqa: E402
from microblog.main import app as fastapi_app  # noqa: E402
from microblog.models import Post, User, UserStatus  # noqa: E402
from microblog.repositories.post_repo import PostRepository  # noqa: E402
from microblog.repositories.user_repo import UserRepository  # noqa: E402

TEST_DB_URL = "sqlite://"


@pytest.fixture()
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
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


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
def user_repo(db_session: Session) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture()
def post_repo(db_session: Session) -> PostRepository:
    return PostRepository(db_session)


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users; established unless told otherwise."""

    def _make_user(username: str, *, established: bool = True) -> User:
        identity_hash = hash_identity(f"test:{username}")
        user = User(
            username=username if established else identity_hash,
            identity_hash=identity_hash,
            status=UserStatus.ESTABLISHED if established else UserStatus.PROVISIONAL,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_post(post_repo: PostRepository) -> Callable[..., Post]:
    """Return a factory persisting posts for a given author."""

    def _make_post(author: User, title: str = "T", content: str = "C") -> Post:
        post = post_repo.create(
            title=title,
            content=content,
            author=author.username,
            author_id=author.id,
        )
        post_repo.session.commit()
        post_repo.session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def alice(make_user: Callable[..., User]) -> User:
    return make_user("alice")


@pytest.fixture()
def bob(make_user: Callable[..., User]) -> User:
    return make_user("bob")


@pytest.fixture()
def provisional_user(make_user: Callable[..., User]) -> User:
    return make_user("pending", established=False)


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers carrying a session token for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id, user.identity_hash)}"}


@pytest.fixture()
def alice_headers(alice: User) -> dict[str, str]:
    return auth_headers(alice)


@pytest.fixture()
def bob_headers(bob: User) -> dict[str, str]:
    return auth_headers(bob)


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Expose ``auth_headers`` to tests that create their own users."""
    return auth_headers
