"""Authentication schemas for sign-in, registration and the session user."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from gigslk.models import Role


class SessionUser(BaseModel):
    """The signed-in account, as reported by the backend at sign-in."""

    model_config = ConfigDict(from_attributes=True)

    id: int | str = Field(description="Upstream account identifier")
    email: str = Field(description="Account email address")
    role: Role = Field(description="Account role")
    username: str | None = Field(default=None, description="Display username")


class LoginRequest(BaseModel):
    """Sign in with email and password.

    Fields default to empty so the presence check can return the
    marketplace's own message instead of a schema error.
    """

    email: str = Field(default="", description="Account email")
    password: str = Field(default="", description="Account password")


class LoginResponse(BaseModel):
    """Result of a successful sign-in."""

    session_token: str = Field(description="Session token, also set as a cookie")
    user: SessionUser = Field(description="The signed-in account")


class RegisterRequest(BaseModel):
    """Create a performer or host account."""

    username: str = Field(default="", description="Display username")
    email: str = Field(default="", description="Account email")
    password: str = Field(default="", description="Account password")
    confirm_password: str = Field(default="", description="Must equal password")
    location: str = Field(default="", description="Home city")
    role: Literal["performer", "host"] = Field(default="performer", description="Account role")


class SessionResponse(BaseModel):
    """The current session's account."""

    authenticated: bool = Field(default=True, description="Authentication status")
    user: SessionUser = Field(description="The signed-in account")
