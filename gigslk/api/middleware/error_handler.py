"""Global error handling middleware for consistent error responses."""

import logging
import traceback
from typing import Any, Callable

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from gigslk.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors.

    Subclasses set `status_code`, `error_type` and `default_message`; the
    error handler middleware turns any of them into the JSON error body.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "api_error"
    default_message: str = "Request failed"

    def __init__(
        self,
        message: str | None = None,
        details: list[dict[str, Any]] | None = None,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        if error_type is not None:
            self.error_type = error_type
        super().__init__(self.message)


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"
    default_message = "Resource not found"


class ValidationError(APIError):
    """Input rejected before anything is sent upstream."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_type = "validation_error"
    default_message = "Validation error"


class UploadTooLargeError(ValidationError):
    """A staged file exceeds the upload size limit."""

    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    error_type = "upload_too_large"
    default_message = "File is too large"


class AuthenticationError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "authentication_error"
    default_message = "Authentication required"


class AuthorizationError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    error_type = "authorization_error"
    default_message = "Access denied"


class ConflictError(APIError):
    """Operation not allowed in the editor's current state."""

    status_code = status.HTTP_409_CONFLICT
    error_type = "conflict"
    default_message = "Conflict"


class UpstreamError(APIError):
    """The upstream backend answered with a non-success status or not at all.

    Upstream 4xx statuses are passed through so the client sees the same
    class of failure; everything else becomes 502.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    error_type = "upstream_error"
    default_message = "Upstream request failed"

    def __init__(
        self,
        message: str | None = None,
        upstream_status: int | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        passthrough = upstream_status is not None and 400 <= upstream_status < 500
        super().__init__(message, details, status_code=upstream_status if passthrough else None)
        self.upstream_status = upstream_status


class FetchError(UpstreamError):
    """Reading a profile (or listing) from upstream failed."""

    error_type = "fetch_error"


class SaveError(UpstreamError):
    """Writing a profile (or admin change) to upstream failed."""

    error_type = "save_error"


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    details: list[dict[str, Any]] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a standardized JSON error response.

    Args:
        error_type: Error category for client handling.
        message: Human-readable error description.
        status_code: HTTP status code.
        details: Optional error details.
        request_id: Optional request ID for tracing.

    Returns:
        JSONResponse: Formatted error response.
    """
    error_response = ErrorResponse.build(
        error_type=error_type,
        message=message,
        details=details,
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Middleware to catch and format all exceptions.

    Ensures consistent error response format across the application.
    Logs full stack traces for debugging while returning safe messages to clients.

    Args:
        request: The incoming request.
        call_next: Next middleware or route handler.

    Returns:
        Response: Either the successful response or formatted error response.
    """
    request_id = request.headers.get("X-Request-ID")

    try:
        response = await call_next(request)
        return response

    except APIError as e:
        logger.warning(
            "API error: %s - %s",
            e.error_type,
            e.message,
            extra={"request_id": request_id, "status_code": e.status_code},
        )
        return create_error_response(
            error_type=e.error_type,
            message=e.message,
            status_code=e.status_code,
            details=e.details,
            request_id=request_id,
        )

    except HTTPException as e:
        logger.warning(
            "HTTP exception: %s - %s",
            e.status_code,
            e.detail,
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="http_error",
            message=str(e.detail),
            status_code=e.status_code,
            request_id=request_id,
        )

    except Exception as e:
        logger.error(
            "Unhandled exception: %s\n%s",
            str(e),
            traceback.format_exc(),
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="internal_error",
            message="An unexpected error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )
