"""Admin user-management schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from gigslk.models import Role


class AdminUser(BaseModel):
    """An account as listed on the admin panel."""

    model_config = ConfigDict(from_attributes=True)

    id: int | str = Field(description="Account ID")
    username: str | None = Field(default=None, description="Display username")
    email: str = Field(default="", description="Account email")
    role: Role = Field(description="Account role")
    status: str | None = Field(default="Active", description="Account status")
    avatar: str | None = Field(default=None, description="Avatar URL")


class AdminUserListResponse(BaseModel):
    users: list[AdminUser] = Field(default_factory=list, description="Matching users")
    total: int = Field(description="Number of matches")


class AdminUserCreate(BaseModel):
    """New account details.

    Fields default to empty so the presence check owns the error message.
    """

    username: str = Field(default="", description="Display username")
    email: str = Field(default="", description="Account email")
    password: str = Field(default="", description="Initial password")
    role: Literal["host", "performer", "admin", ""] = Field(default="performer", description="Account role")
