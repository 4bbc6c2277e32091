"""Upstream account record type definitions."""

from typing import Literal, TypedDict

Role = Literal["host", "performer", "admin"]


class UserRecord(TypedDict, total=False):
    """Account as returned by the auth and admin endpoints."""

    id: int
    username: str | None
    email: str
    role: Role
    status: str | None
    avatar: str | None


class LoginEnvelope(TypedDict):
    """Body of a successful sign-in."""

    token: str
    user: UserRecord
