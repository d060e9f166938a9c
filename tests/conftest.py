"""Shared fixtures: a throwaway SQLite database and an API client."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

TEST_DB_PATH = Path(tempfile.mkdtemp(prefix="backoffice-tests-")) / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["ENVIRONMENT"] = "test"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ["EMAIL_NOTIFICATIONS_ENABLED"] = "false"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

from backoffice.config import get_settings  # noqa: E402

get_settings.cache_clear()

from backoffice.domain.entities import User  # noqa: E402
from backoffice.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from backoffice.infrastructure.repositories import (  # noqa: E402
    RoleRepository,
    UserRepository,
)
from backoffice.infrastructure.security import get_password_hash  # noqa: E402

PASSWORD = "Secret123"
_password_hash: str | None = None


def _hashed_password() -> str:
    global _password_hash
    if _password_hash is None:
        _password_hash = get_password_hash(PASSWORD)
    return _password_hash


class RecordingBroadcaster:
    """Broadcast port double that remembers every emit."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    def emit(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        self.events.append((channel, event, payload))

    def channels(self) -> list[str]:
        return [channel for channel, _, _ in self.events]


class RecordingEmailSender:
    """Email sender double; addresses in ``failing`` are rejected."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.sent: list[tuple[str, str]] = []
        self.failing = failing or set()

    def __call__(self, subject: str, html_content: str, recipient: str) -> bool:
        if recipient in self.failing:
            return False
        self.sent.append((recipient, subject))
        return True


@pytest.fixture(autouse=True)
def reset_database() -> Iterator[None]:
    """Start every test from an empty schema."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Iterator[Any]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db_session) -> Callable[..., User]:
    """Factory inserting users that all share :data:`PASSWORD`."""

    counter = {"value": 0}

    def factory(
        role: str = "individual",
        *,
        email: str | None = "",
        name: str | None = None,
        verified: bool = True,
        is_active: bool = True,
        deleted: bool = False,
    ) -> User:
        counter["value"] += 1
        index = counter["value"]
        if email == "":
            email = f"{role}{index}@example.com"
        role_entity = RoleRepository(db_session).get_or_create(role)
        return UserRepository(db_session).create(
            User(
                id=None,
                role=role_entity,
                name=name or f"{role.title()} {index}",
                email=email,
                password=_hashed_password(),
                verified=verified,
                is_active=is_active,
                deleted=deleted,
                created_at=None,
            )
        )

    return factory


@pytest.fixture()
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture()
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture()
def client(broadcaster, email_sender) -> Iterator[Any]:
    """API client whose realtime and email adapters are recording doubles."""

    from fastapi.testclient import TestClient

    from backoffice.application.use_cases.notifications import FanoutOptions
    from backoffice.interfaces.api.dependencies import get_email_sender, get_fanout_options
    from main import create_app

    app = create_app()
    app.state.broadcaster = broadcaster
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    app.dependency_overrides[get_fanout_options] = lambda: FanoutOptions(
        batch_size=2, email_enabled=True
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def login(client) -> Callable[[User], dict[str, str]]:
    """Return bearer headers for ``user``."""

    def _login(user: User) -> dict[str, str]:
        response = client.post(
            "/auth/token", data={"username": user.email, "password": PASSWORD}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login


@pytest.fixture()
def password() -> str:
    return PASSWORD
