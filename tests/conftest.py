# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Point the application engine at a throwaway database before anything imports it.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from gridchat.api.v1.dependencies import get_store
from gridchat.core.security import create_access_token
from gridchat.db.session import Base, drop_tables
from gridchat.main import app as fastapi_app
from gridchat.schemas.profile import ProfileView
from gridchat.services.discussion import DiscussionStore

TEST_DB_URL = "sqlite://"
START_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
DAY = "2024-05-01"
PARTITION = f"10:20_{DAY}"
OTHER_PARTITION = f"11:20_{DAY}"


class SteppingClock:
    """Deterministic clock advancing a fixed step on every read."""

    def __init__(self, start: datetime = START_TIME, step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture(scope="session")
def engine() -> Iterator[Engine]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> Iterator[sessionmaker[Session]]:
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    try:
        yield factory
    finally:
        # Ensure each test sees a clean database.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture()
def store(session_factory: sessionmaker[Session], clock: SteppingClock) -> DiscussionStore:
    """Vote-model store over the test database."""
    return DiscussionStore(session_factory, reaction_model="vote", clock=clock)


@pytest.fixture()
def like_store(session_factory: sessionmaker[Session], clock: SteppingClock) -> DiscussionStore:
    """Like-model store over the test database."""
    return DiscussionStore(session_factory, reaction_model="like", clock=clock)


def make_profile(store: DiscussionStore, username: str) -> ProfileView:
    profile = store.register_profile("test", f"{username}-subject")
    return store.rename_author(profile.id, username)


@pytest.fixture()
def alice(store: DiscussionStore) -> ProfileView:
    return make_profile(store, "alice")


@pytest.fixture()
def bob(store: DiscussionStore) -> ProfileView:
    return make_profile(store, "bob")


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI, store: DiscussionStore) -> Iterator[TestClient]:
    app.dependency_overrides[get_store] = lambda: store
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_store, None)


@pytest.fixture()
def auth_token(alice: ProfileView) -> dict[str, str]:
    """Return authorization headers for alice."""
    return {"Authorization": f"Bearer {create_access_token(alice.id)}"}


@pytest.fixture()
def other_auth_token(bob: ProfileView) -> dict[str, str]:
    """Return authorization headers for bob."""
    return {"Authorization": f"Bearer {create_access_token(bob.id)}"}
