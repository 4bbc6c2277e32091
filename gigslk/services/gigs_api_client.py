"""HTTP client for the upstream marketplace backend."""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from gigslk.api.middleware.error_handler import FetchError, SaveError, UpstreamError
from gigslk.core.config import Settings, get_settings
from gigslk.core.http_client import get_http_client
from gigslk.models import LoginEnvelope, ProfileRecord, UserRecord

logger = logging.getLogger(__name__)

# (field name, (filename, content, content type)) as httpx expects for multipart
FilePart = tuple[str, tuple[str, bytes, str]]


@dataclass
class MultipartPayload:
    """A multipart submission: named text values plus file parts.

    Both are lists so a name may repeat (e.g. one part per gallery file).
    """

    data: list[tuple[str, str]] = field(default_factory=list)
    files: list[FilePart] = field(default_factory=list)

    def add(self, name: str, value: str) -> None:
        self.data.append((name, value))

    def attach(self, name: str, filename: str, content: bytes, content_type: str) -> None:
        self.files.append((name, (filename, content, content_type)))

    def values(self, name: str) -> list[str]:
        """All text values submitted under `name`, in order."""
        return [value for key, value in self.data if key == name]

    def value(self, name: str) -> str | None:
        values = self.values(name)
        return values[0] if values else None

    def file_names(self, name: str) -> list[str]:
        return [part[1][0] for part in self.files if part[0] == name]

    def parts(self) -> list[tuple[str, tuple[str | None, str | bytes] | tuple[str, bytes, str]]]:
        """Every part in submission order, text values first.

        Text values become parts without a filename, so the body is
        multipart/form-data even when no file is attached.
        """
        return [(name, (None, value)) for name, value in self.data] + list(self.files)


def error_message(response: httpx.Response, fallback: str) -> str:
    """Extract the `{message}` of an upstream error body, or the fallback."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return fallback


class GigsApiClient:
    """Thin async wrapper around the marketplace backend's JSON API.

    Every method raises an UpstreamError subclass on a non-success status
    or a transport failure, carrying the backend's message when it sent one.
    """

    def __init__(
        self,
        http: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.http = http or get_http_client()
        self.settings = settings or get_settings()

    def _auth_headers(self, token: str) -> dict[str, str]:
        return {self.settings.upstream_auth_header: token}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        fallback: str,
        error_cls: type[UpstreamError] = UpstreamError,
        token: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        headers = self._auth_headers(token) if token else {}
        try:
            response = await self.http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise error_cls(fallback) from e

        if response.is_error:
            message = error_message(response, fallback)
            logger.warning("%s %s returned %d: %s", method, path, response.status_code, message)
            raise error_cls(message, upstream_status=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise error_cls(fallback, upstream_status=response.status_code) from e
        return body if isinstance(body, dict) else {"data": body}

    # Profiles

    async def get_profile(self, endpoint: str, token: str, fallback: str) -> ProfileRecord | None:
        """Fetch the current account's profile record.

        Returns:
            The record, or None when the account has no profile yet.
        """
        body = await self._request("GET", endpoint, token=token, fallback=fallback, error_cls=FetchError)
        profile = body.get("profile")
        return profile if isinstance(profile, dict) else None

    async def put_profile(
        self,
        endpoint: str,
        token: str,
        payload: MultipartPayload,
        fallback: str,
    ) -> dict[str, Any]:
        """Submit a full profile as a multipart/form-data body."""
        return await self._request(
            "PUT",
            endpoint,
            token=token,
            fallback=fallback,
            error_cls=SaveError,
            files=payload.parts(),
        )

    # Auth

    async def login(self, email: str, password: str) -> LoginEnvelope:
        return await self._request(
            "POST",
            "/api/auth/login",
            fallback="Login failed",
            json={"email": email, "password": password},
        )

    async def register(self, email: str, password: str, username: str, role: str) -> dict[str, Any]:
        return await self._request(
            "POST",
            "/api/auth/register",
            fallback="Registration failed",
            json={"email": email, "password": password, "username": username, "role": role},
        )

    # Public directory

    async def list_performers(self) -> list[dict[str, Any]]:
        body = await self._request(
            "GET", "/api/performers", fallback="Failed to fetch artists.", error_cls=FetchError
        )
        profiles = body.get("profiles")
        return [p for p in profiles if isinstance(p, dict)] if isinstance(profiles, list) else []

    # Admin

    async def list_users(self, token: str) -> list[UserRecord]:
        body = await self._request(
            "GET", "/api/admin/users", token=token, fallback="Failed to fetch users.", error_cls=FetchError
        )
        users = body.get("users")
        return [u for u in users if isinstance(u, dict)] if isinstance(users, list) else []

    async def create_user(self, token: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request(
            "POST", "/api/admin/users", token=token, fallback="Failed to add user.", error_cls=SaveError, json=data
        )

    async def delete_user(self, token: str, user_id: int | str) -> dict[str, Any]:
        return await self._request(
            "DELETE",
            f"/api/admin/users/{user_id}",
            token=token,
            fallback="Failed to delete user.",
            error_cls=SaveError,
        )


def get_api_client() -> GigsApiClient:
    """Dependency provider for the upstream client."""
    return GigsApiClient()
