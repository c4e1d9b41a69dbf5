"""Shared fixtures for the test suite."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.db import get_session
from app.identity.errors import ProviderError
from app.identity.launch import LaunchFlag
from app.identity.tracker import AuthTracker
from app.main import app
from app.onboarding.worker import SubmissionWorker
from app.services import Services, get_services

USER_ID = "5b0f8a2e-6a51-4c1e-9d1a-3f6f0d1c2b7a"


def make_user_payload(
    email: str = "lifter@example.com",
    user_id: str = USER_ID,
) -> dict[str, Any]:
    """Helper to build a provider (GoTrue) user object."""
    return {
        "id": user_id,
        "aud": "authenticated",
        "email": email,
        "created_at": "2026-02-15T12:00:00Z",
    }


# ---------------------------------------------------------------------------
# Fake identity provider (no network needed)
# ---------------------------------------------------------------------------

class FakeProvider:
    """In-memory stand-in for GoTrueProvider. Set *_error to make a call fail."""

    def __init__(self, user: dict[str, Any] | None = None):
        self.user = user or make_user_payload()
        self.session: dict[str, Any] | None = None
        self.auth_error: str | None = None
        self.sign_out_error: str | None = None
        self.session_error: str | None = None
        self.calls: list[str] = []

    async def sign_up(self, email: str, password: str) -> dict[str, Any]:
        self.calls.append("sign_up")
        if self.auth_error:
            raise ProviderError(self.auth_error, status_code=400)
        self.session = self.user
        return self.user

    async def sign_in(self, email: str, password: str) -> dict[str, Any]:
        self.calls.append("sign_in")
        if self.auth_error:
            raise ProviderError(self.auth_error, status_code=400)
        self.session = self.user
        return self.user

    async def sign_out(self) -> None:
        self.calls.append("sign_out")
        if self.sign_out_error:
            raise ProviderError(self.sign_out_error)
        self.session = None

    async def get_session(self) -> dict[str, Any] | None:
        self.calls.append("get_session")
        if self.session_error:
            raise ProviderError(self.session_error, status_code=401)
        return self.session

    def oauth_url(self, provider: str, redirect_to: str) -> str:
        if provider not in ("google", "apple"):
            raise ValueError(f"Unsupported OAuth provider: {provider}")
        return f"https://auth.test/authorize?provider={provider}&redirect_to={redirect_to}"


# ---------------------------------------------------------------------------
# Fake DB session
# ---------------------------------------------------------------------------

class FakeSession:
    """Minimal stand-in for AsyncSession; records statements."""

    def __init__(self, rows: list[dict[str, Any]] | None = None, rowcount: int = 1):
        self._rows = rows or []
        self.rowcount = rowcount
        self.executed: list[tuple[str, dict]] = []
        self.commits = 0
        self.rollbacks = 0

    async def execute(self, stmt, params=None):
        self.executed.append((str(stmt), params or {}))
        return FakeResult(self._rows, self.rowcount)

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]], rowcount: int = 1):
        self._rows = rows
        self._keys = list(rows[0].keys()) if rows else []
        self.rowcount = rowcount

    def keys(self):
        return self._keys

    def fetchone(self):
        if not self._rows:
            return None
        return tuple(self._rows[0][k] for k in self._keys)

    def fetchall(self):
        return [tuple(r[k] for k in self._keys) for r in self._rows]


class RecordingSubmit:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple[Any, Any]] = []

    async def __call__(self, user_id, record) -> None:
        self.calls.append((user_id, record))
        if self.error is not None:
            raise self.error


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def provider():
    return FakeProvider()


@pytest.fixture()
def tracker(provider):
    return AuthTracker(provider, oauth_redirect_url="nero://login")


@pytest.fixture()
def submit():
    return RecordingSubmit()


@pytest.fixture()
async def worker(submit):
    w = SubmissionWorker(submit, notifications_limit=5)
    w.start()
    yield w
    await w.stop()


@pytest.fixture()
def launch_flag(tmp_path):
    return LaunchFlag(tmp_path / "has_launched")


@pytest.fixture()
def services(tracker, worker, launch_flag):
    return Services(tracker=tracker, worker=worker, launch_flag=launch_flag)


@pytest.fixture()
def fake_session():
    """Return a FakeSession with no rows (override _rows in tests if needed)."""
    return FakeSession()


@pytest.fixture()
def override_deps(services, fake_session):
    """Override the FastAPI dependencies so no provider or DB is needed."""
    async def _session():
        yield fake_session

    app.dependency_overrides[get_services] = lambda: services
    app.dependency_overrides[get_session] = _session
    yield services
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_deps):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
