"""Response bodies shared by several route groups."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from gigslk import __version__


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Liveness: the process is up. Says nothing about the upstream backend."""

    status: HealthStatus
    timestamp: datetime = Field(default_factory=utcnow)
    version: str = __version__


class CheckResult(BaseModel):
    """Outcome of checking one dependency, e.g. the marketplace backend."""

    name: str
    healthy: bool
    latency_ms: float | None = Field(default=None, description="Round trip of the check")
    error: str | None = None


class ReadinessResponse(BaseModel):
    status: HealthStatus
    timestamp: datetime = Field(default_factory=utcnow)
    checks: list[CheckResult] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str = Field(description="Text shown to the user as-is")


class ErrorDetail(BaseModel):
    """One problem within an error, e.g. a rejected upload."""

    loc: list[str] | None = Field(default=None, description="Path to the offending input")
    msg: str
    type: str = "error"


class ErrorResponse(BaseModel):
    """Body of every non-2xx response this service produces.

    `message` is meant for display; `error` is a stable category such as
    `save_error` or `upload_too_large` that clients can branch on.
    """

    error: str
    message: str
    details: list[ErrorDetail] | None = None
    request_id: str | None = Field(default=None, description="Echo of the X-Request-ID header")
    timestamp: datetime = Field(default_factory=utcnow)

    @classmethod
    def build(
        cls,
        error_type: str,
        message: str,
        details: list[dict[str, Any]] | None = None,
        request_id: str | None = None,
    ) -> "ErrorResponse":
        """Assemble a body from an error's parts; loose detail dicts are normalized."""
        parsed = [
            ErrorDetail(loc=d.get("loc"), msg=d.get("msg", str(d)), type=d.get("type", "error")) for d in details or []
        ]
        return cls(error=error_type, message=message, details=parsed or None, request_id=request_id)
