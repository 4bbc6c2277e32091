"""Admin user management."""

import logging

from pydantic import ValidationError as PydanticValidationError

from gigslk.api.middleware.error_handler import ValidationError
from gigslk.schemas.admin import AdminUser, AdminUserCreate
from gigslk.services.gigs_api_client import GigsApiClient
from gigslk.services.session_service import AuthSession

logger = logging.getLogger(__name__)


def filter_users(users: list[AdminUser], query: str) -> list[AdminUser]:
    """Case-insensitive substring match on username, email or role."""
    needle = query.strip().lower()
    if not needle:
        return users
    return [
        user
        for user in users
        if needle in (user.username or "").lower() or needle in user.email.lower() or needle in user.role
    ]


class AdminService:
    """List, add and delete accounts on behalf of an admin session."""

    def __init__(self, api: GigsApiClient, session: AuthSession) -> None:
        self.api = api
        self.session = session

    async def list_users(self, query: str = "") -> list[AdminUser]:
        users: list[AdminUser] = []
        for record in await self.api.list_users(self.session.token):
            try:
                users.append(AdminUser.model_validate(record))
            except PydanticValidationError:
                logger.warning("Skipping malformed user record %r", record.get("id"))
        return filter_users(users, query)

    async def add_user(self, data: AdminUserCreate) -> str:
        """Create an account.

        Returns:
            str: The backend's confirmation message.

        Raises:
            ValidationError: If any field is blank; nothing is sent.
            SaveError: If the backend rejects the account.
        """
        if not all([data.username.strip(), data.email.strip(), data.password, data.role]):
            raise ValidationError("Please fill all fields for the new user.")
        body = await self.api.create_user(self.session.token, data.model_dump())
        logger.info("Admin %s added %s account %s", self.session.user.id, data.role, data.email)
        message = body.get("message")
        return message if isinstance(message, str) and message else "User added successfully!"

    async def delete_user(self, user_id: int | str) -> str:
        body = await self.api.delete_user(self.session.token, user_id)
        logger.info("Admin %s deleted account %s", self.session.user.id, user_id)
        message = body.get("message")
        return message if isinstance(message, str) and message else "User deleted successfully!"
