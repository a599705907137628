"""
Pytest configuration and shared fixtures.

Settings are read from the environment at import time, so the test database,
media root and feature flags are set here before any glimpse module loads.
"""

import os
import shutil
import tempfile
from datetime import datetime, timedelta

_TEST_ROOT = tempfile.mkdtemp(prefix="glimpse-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_ROOT, 'test.db')}"
os.environ["MEDIA_ROOT"] = os.path.join(_TEST_ROOT, "media")
os.environ["MEDIA_BASE_URL"] = "/media"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ALLOW_HEADER_AUTH"] = "true"
os.environ["REQUIRE_FRIENDSHIP_TO_MESSAGE"] = "false"
os.environ["REVEAL_WINDOW_SECONDS"] = "10"

import pytest
from fastapi.testclient import TestClient

from glimpse.database import Base, get_engine, get_session_local
from glimpse.dependencies import get_clock
from glimpse.main import app
from glimpse.models import User


T0 = datetime(2025, 1, 15, 10, 0, 0)


@pytest.fixture(scope="session", autouse=True)
def test_root():
    """Remove the temporary database and media root once the run is over."""
    yield _TEST_ROOT
    get_engine().dispose()
    shutil.rmtree(_TEST_ROOT, ignore_errors=True)


class SteppableClock:
    """Frozen clock that only moves when a test advances it."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def clock(t0):
    return SteppableClock(t0)


@pytest.fixture(autouse=True)
def tables():
    """Fresh schema for every test."""
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return get_session_local()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db):
    """Three registered users: alice, bob and carol."""
    people = [
        User(id="alice", email="alice@glimpse.app", username="alice", display_name="Alice Smith", initials="AS"),
        User(id="bob", email="bob@glimpse.app", username="bob", display_name="Bob Jones", initials="BJ"),
        User(id="carol", email="carol@glimpse.app", username="carol", display_name="Carol King", initials="CK"),
    ]
    db.add_all(people)
    db.commit()
    return {user.id: user for user in people}


@pytest.fixture
def client(users, clock):
    """Test client with the steppable clock wired into every component."""
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    """Headers authenticating as the given user id."""
    def _headers(user_id: str) -> dict:
        return {"X-User-ID": user_id}
    return _headers
