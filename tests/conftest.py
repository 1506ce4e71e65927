"""Shared fixtures: a file-backed SQLite database per test and an app bound to it."""
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from ltc_tracker.config import Settings
from ltc_tracker.db import Database, Role
from ltc_tracker.main import create_app
from ltc_tracker.security import OwnershipGuard, PasswordHasher, SessionStore
from ltc_tracker.services import (AccountRepository, DailyStatRepository,
                                  IdentityStore)

PASSWORD = "s3cret-pass"


class FakeClock:
    """Settable replacement for utcnow()."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, 12, 0, 0)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'tracker.db'}",
        session_reap_interval=0,
    )


@pytest.fixture
def database(settings):
    db = Database(settings.database_url)
    db.init()
    yield db
    db.dispose()


@pytest.fixture
def guard() -> OwnershipGuard:
    return OwnershipGuard()


@pytest.fixture
def identities(database) -> IdentityStore:
    return IdentityStore(database, PasswordHasher())


@pytest.fixture
def accounts(database, guard) -> AccountRepository:
    return AccountRepository(database, guard)


@pytest.fixture
def stats(database, guard) -> DailyStatRepository:
    return DailyStatRepository(database, guard)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sessions(database, clock) -> SessionStore:
    return SessionStore(database, ttl=timedelta(hours=24), clock=clock)


@pytest.fixture
def alice(identities):
    return identities.create_user("alice@example.com", PASSWORD, "Alice")


@pytest.fixture
def bob(identities):
    return identities.create_user("bob@example.com", PASSWORD, "Bob")


@pytest.fixture
def admin(identities):
    return identities.create_user("admin@example.com", PASSWORD, "Admin", role=Role.ADMIN)


# --- HTTP fixtures -----------------------------------------------------------


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def login(client: TestClient, email: str, password: str = PASSWORD):
    return client.post("/login", json={"email": email, "password": password})


@pytest.fixture
def user_client(app, client):
    """Client logged in as alice@example.com."""
    app.state.container.identities().create_user("alice@example.com", PASSWORD, "Alice")
    response = login(client, "alice@example.com")
    assert response.status_code == 200
    return client


@pytest.fixture
def other_client(app, client):
    """Second client (own cookie jar) logged in as bob@example.com."""
    app.state.container.identities().create_user("bob@example.com", PASSWORD, "Bob")
    other = TestClient(app)
    response = login(other, "bob@example.com")
    assert response.status_code == 200
    return other
