"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from wikiquest import create_app, db
from wikiquest.models import Quest, User


@pytest.fixture
def app():
    """Create and configure a test application instance."""
    app = create_app("testing")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def fixed_now():
    """A mid-afternoon UTC instant far from any day boundary."""
    return datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def frozen_clock(app, fixed_now):
    """Pin the progression clock used by request handlers."""
    app.config["PROGRESSION_CLOCK"] = lambda: fixed_now
    yield fixed_now
    app.config["PROGRESSION_CLOCK"] = None


@pytest.fixture
def test_user(app):
    """Create a test user in the database."""
    with app.app_context():
        user = User(
            email="test@example.org",
            username="test_user",
            display_name="Test User",
        )
        user.set_password("correct-horse")
        db.session.add(user)
        db.session.commit()

        # Refresh to get the ID
        db.session.refresh(user)
        return {"id": user.id, "email": user.email}


@pytest.fixture
def set_progress(app, test_user):
    """Overwrite the test user's stored progression fields."""

    def _set(total_xp=None, streak=None, last_check_in=None, level=None):
        user = db.session.get(User, test_user["id"])
        if total_xp is not None:
            user.total_xp = total_xp
        if streak is not None:
            user.streak = streak
        if level is not None:
            user.level = level
        if last_check_in is not None:
            user.last_check_in = last_check_in.astimezone(timezone.utc).replace(
                tzinfo=None
            )
        db.session.commit()
        return user

    return _set


@pytest.fixture
def days_ago(fixed_now):
    """Timestamps relative to ``fixed_now``."""

    def _days_ago(days: int, hours: int = 0):
        return fixed_now - timedelta(days=days, hours=hours)

    return _days_ago


@pytest.fixture
def quest(app):
    """An active quest worth 100 XP."""
    quest = Quest(title="Cite your sources", description="Add citations", xp_reward=100)
    db.session.add(quest)
    db.session.commit()
    return {"id": quest.id, "xp_reward": quest.xp_reward}


@pytest.fixture
def auth_headers(client, test_user):
    """Get authorization headers with JWT token."""
    response = client.post(
        "/api/v1/auth/dev",
        json={"email": test_user["email"], "username": "test_user"},
    )
    assert response.status_code == 200
    token = response.json["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_client(client, auth_headers):
    """Create an authenticated test client wrapper."""

    class AuthenticatedClient:
        def __init__(self, client, headers):
            self._client = client
            self._headers = headers

        def get(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.get(*args, **kwargs)

        def post(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.post(*args, **kwargs)

        def put(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.put(*args, **kwargs)

    return AuthenticatedClient(client, auth_headers)
