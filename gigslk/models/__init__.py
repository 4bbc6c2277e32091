"""Upstream record type definitions."""

from gigslk.models.profile import ArtistRecord, HostRecord, ProfileRecord
from gigslk.models.user import LoginEnvelope, Role, UserRecord

__all__ = [
    "ArtistRecord",
    "HostRecord",
    "ProfileRecord",
    "LoginEnvelope",
    "Role",
    "UserRecord",
]
