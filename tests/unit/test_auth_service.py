"""Unit tests for sign-in and registration."""

from unittest.mock import AsyncMock

import pytest

from gigslk.api.middleware.error_handler import UpstreamError, ValidationError
from gigslk.schemas.auth import RegisterRequest
from gigslk.services.auth_service import AuthService
from gigslk.services.gigs_api_client import GigsApiClient
from gigslk.services.session_service import SessionService

LOGIN_BODY = {
    "token": "upstream-token",
    "user": {"id": 7, "email": "jay@example.com", "role": "performer", "username": "jdoe"},
}


@pytest.fixture
def api() -> AsyncMock:
    api = AsyncMock(spec=GigsApiClient)
    api.login.return_value = LOGIN_BODY
    api.register.return_value = {"message": "User registered"}
    return api


@pytest.fixture
def sessions() -> SessionService:
    return SessionService()


@pytest.fixture
def service(api: AsyncMock, sessions: SessionService) -> AuthService:
    return AuthService(api, sessions)


class TestLogin:
    """Tests for signing in."""

    @pytest.mark.asyncio
    async def test_login_starts_session(self, service: AuthService, sessions: SessionService) -> None:
        """Test that a successful login creates a session holding the token."""
        session = await service.login("jay@example.com", "pw")

        assert session.token == "upstream-token"
        assert session.user.role == "performer"
        assert sessions.get(session.session_id) is session

    @pytest.mark.asyncio
    async def test_blank_credentials_are_not_sent(self, service: AuthService, api: AsyncMock) -> None:
        """Test that blank credentials fail without calling the backend."""
        with pytest.raises(ValidationError) as exc_info:
            await service.login("jay@example.com", "")

        assert exc_info.value.message == "Please enter both email and password."
        api.login.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_response_without_token_fails(self, service: AuthService, api: AsyncMock) -> None:
        """Test that a login response without a token is an error."""
        api.login.return_value = {"user": LOGIN_BODY["user"]}

        with pytest.raises(UpstreamError) as exc_info:
            await service.login("jay@example.com", "pw")

        assert exc_info.value.message == "Login failed"

    @pytest.mark.asyncio
    async def test_response_without_user_fails(
        self, service: AuthService, api: AsyncMock, sessions: SessionService
    ) -> None:
        """Test that a login response without a user is an error."""
        api.login.return_value = {"token": "t"}

        with pytest.raises(UpstreamError):
            await service.login("jay@example.com", "pw")

        assert len(sessions) == 0


class TestRegister:
    """Tests for registration."""

    @pytest.mark.asyncio
    async def test_password_mismatch_checked_first(self, service: AuthService, api: AsyncMock) -> None:
        """Test that mismatched passwords are reported before missing fields."""
        request = RegisterRequest(email="a@b.c", password="one", confirm_password="two")

        with pytest.raises(ValidationError) as exc_info:
            await service.register(request)

        assert exc_info.value.message == "Passwords do not match."
        api.register.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_fields(self, service: AuthService, api: AsyncMock) -> None:
        """Test that registration requires every field."""
        request = RegisterRequest(username="jay", email="a@b.c", password="pw", confirm_password="pw")

        with pytest.raises(ValidationError) as exc_info:
            await service.register(request)

        assert exc_info.value.message == "Please fill in all fields."
        api.register.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_register(self, service: AuthService, api: AsyncMock) -> None:
        """Test that registration forwards the account details."""
        request = RegisterRequest(
            username="jay", email="a@b.c", password="pw", confirm_password="pw", location="Colombo", role="host"
        )

        assert await service.register(request) == "User registered"
        api.register.assert_awaited_once_with("a@b.c", "pw", "jay", "host")


class TestLogout:
    """Tests for signing out."""

    @pytest.mark.asyncio
    async def test_logout_destroys_session(self, service: AuthService, sessions: SessionService) -> None:
        """Test that logout destroys the session."""
        session = await service.login("jay@example.com", "pw")

        assert service.logout(session.session_id)
        assert sessions.get(session.session_id) is None
