"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("API_BASE_URL", "http://upstream.test")
os.environ.setdefault("SESSION_COOKIE_SECURE", "false")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:5173")


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from gigslk.core.config import get_settings

    get_settings.cache_clear()

    settings = get_settings()
    yield settings

    get_settings.cache_clear()


@pytest.fixture
def mock_api() -> Generator[AsyncMock, None, None]:
    """Replace the upstream client in every route with an AsyncMock.

    Yields:
        AsyncMock: Stand-in for GigsApiClient.
    """
    from gigslk.main import app
    from gigslk.services.gigs_api_client import GigsApiClient, get_api_client

    api = AsyncMock(spec=GigsApiClient)
    app.dependency_overrides[get_api_client] = lambda: api
    yield api
    app.dependency_overrides.pop(get_api_client, None)


@pytest.fixture
def client(mock_api: AsyncMock) -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Yields:
        TestClient: FastAPI test client.
    """
    from gigslk.main import app

    with TestClient(app) as test_client:
        yield test_client


def sign_in(role: str = "performer", username: str | None = "tester", user_id: int = 7) -> dict[str, str]:
    """Start a session directly in the session store.

    Returns:
        Headers that authenticate a request as that session.
    """
    from gigslk.schemas.auth import SessionUser
    from gigslk.services.session_service import get_session_service

    user = SessionUser(id=user_id, email=f"{role}@example.com", role=role, username=username)
    session = get_session_service().create("upstream-token", user)
    return {"x-session-token": session.session_id}


@pytest.fixture
def performer_headers() -> dict[str, str]:
    return sign_in("performer")


@pytest.fixture
def host_headers() -> dict[str, str]:
    return sign_in("host", username="Acme Events", user_id=8)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return sign_in("admin", username="root", user_id=1)


@pytest.fixture
def other_performer_headers() -> dict[str, str]:
    return sign_in("performer", username="other", user_id=99)
