"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt  # PyJWT
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_data_store, get_ride_api, reset_container
from modules.mock_api.service import MockApiService
from modules.mock_api.store import MockDataStore
from shared.config import get_settings

NOW_MS = 1_700_000_000_000


async def no_sleep(_seconds: float) -> None:
    """Stand-in for asyncio.sleep that returns immediately."""
    return None


class FakeClock:
    """Callable epoch-milliseconds clock that only moves when told to."""

    def __init__(self, now: int = NOW_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeTimer:
    def __init__(self, due: int, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler driven by advance() instead of the event loop.

    Timers fire in due order once the virtual time reaches them.
    """

    def __init__(self):
        self.now = 0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + delay_ms, callback)
        self.timers.append(timer)
        return timer

    def advance(self, ms: int) -> None:
        self.now += ms
        due = sorted((t for t in self.timers if t.due <= self.now), key=lambda t: t.due)
        for timer in due:
            self.timers.remove(timer)
            if not timer.cancelled:
                timer.callback()

    @property
    def pending(self) -> int:
        return len(self.timers)


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@purdue.edu",
    expired: bool = False,
    token_type: str = "access",
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        token_type: "access" or "refresh"

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "type": token_type,
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, get_settings().jwt_secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def reset_service_container():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def data_store() -> MockDataStore:
    """A small deterministic dataset."""
    return MockDataStore.seeded(users=5, rides=5, requests=5, seed=1234)


@pytest.fixture
def api(data_store: MockDataStore, clock: FakeClock) -> MockApiService:
    """Mock API with no latency and no injected failures."""
    return MockApiService(
        data_store,
        error_rate=0.0,
        rng=random.Random(7),
        sleep=no_sleep,
        clock=clock,
    )


@pytest.fixture
def failing_api(data_store: MockDataStore, clock: FakeClock) -> MockApiService:
    """Mock API where every call fails transiently."""
    return MockApiService(
        data_store,
        error_rate=1.0,
        rng=random.Random(7),
        sleep=no_sleep,
        clock=clock,
    )


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@purdue.edu"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def live_api(data_store: MockDataStore) -> MockApiService:
    """Mock API on the wall clock, so the tokens it mints pass authentication."""
    return MockApiService(
        data_store,
        error_rate=0.0,
        rng=random.Random(7),
        sleep=no_sleep,
    )


@pytest.fixture
def app(data_store: MockDataStore, live_api: MockApiService) -> FastAPI:
    """A fresh app wired to the test dataset."""
    application = create_app()
    application.dependency_overrides[get_ride_api] = lambda: live_api
    application.dependency_overrides[get_data_store] = lambda: data_store
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def login_headers(client: TestClient, email: str) -> dict[str, str]:
    """Log in through the API and return bearer headers for the session."""
    response = client.post("/api/auth/login", json={"email": email, "password": "anything"})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}
