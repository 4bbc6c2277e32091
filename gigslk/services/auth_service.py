"""Sign-in, registration and sign-out against the marketplace backend."""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from gigslk.api.middleware.error_handler import UpstreamError, ValidationError
from gigslk.schemas.auth import RegisterRequest, SessionUser
from gigslk.services.gigs_api_client import GigsApiClient
from gigslk.services.session_service import AuthSession, SessionService

logger = logging.getLogger(__name__)


class AuthService:
    """Service for managing account sessions."""

    def __init__(self, api: GigsApiClient, sessions: SessionService) -> None:
        self.api = api
        self.sessions = sessions

    async def login(self, email: str, password: str) -> AuthSession:
        """Sign in and start a session.

        Args:
            email: Account email.
            password: Account password.

        Returns:
            AuthSession: The new session holding the upstream token.

        Raises:
            ValidationError: If either credential is blank.
            UpstreamError: If the backend rejects the credentials.
        """
        if not email or not password:
            raise ValidationError("Please enter both email and password.")

        body = await self.api.login(email, password)
        token = body.get("token")
        try:
            user = SessionUser.model_validate(body.get("user") or {})
        except PydanticValidationError as e:
            logger.error("Login response carried no usable account: %s", e)
            raise UpstreamError("Login failed") from e
        if not isinstance(token, str) or not token:
            logger.error("Login response for %s carried no token", email)
            raise UpstreamError("Login failed")

        return self.sessions.create(token, user)

    async def register(self, request: RegisterRequest) -> str:
        """Create an account.

        Returns:
            str: The backend's confirmation message.

        Raises:
            ValidationError: If passwords differ or a field is blank.
            UpstreamError: If the backend rejects the registration.
        """
        if request.password != request.confirm_password:
            raise ValidationError("Passwords do not match.")
        if not all([request.username, request.email, request.password, request.location]):
            raise ValidationError("Please fill in all fields.")

        body: dict[str, Any] = await self.api.register(
            request.email, request.password, request.username, request.role
        )
        logger.info("Registered %s account for %s", request.role, request.email)
        message = body.get("message")
        return message if isinstance(message, str) and message else "Registration successful!"

    def logout(self, session_id: str) -> bool:
        """End a session, closing its editors and releasing its previews."""
        return self.sessions.destroy(session_id)
