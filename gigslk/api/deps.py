"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Path, Request, Response

from gigslk.api.middleware.error_handler import AuthenticationError, AuthorizationError, NotFoundError
from gigslk.core.config import Settings, get_settings
from gigslk.services.editor_registry import EditorRegistry, get_editor_registry
from gigslk.services.gigs_api_client import GigsApiClient, get_api_client
from gigslk.services.media import MediaUrlResolver
from gigslk.services.preview_registry import PreviewRegistry, get_preview_registry
from gigslk.services.profile_editor import ProfileEditor
from gigslk.services.profile_fields import ProfileKind, ProfileSchema, get_profile_schema
from gigslk.services.session_service import AuthSession, SessionService, get_session_service


def get_session_cookie_config() -> dict:
    """Get session cookie configuration from settings."""
    settings = get_settings()
    # SameSite=None requires Secure=True; fall back to Lax for local development
    samesite = "none" if settings.session_cookie_secure else "lax"
    return {
        "key": settings.session_cookie_name,
        "max_age": settings.session_cookie_max_age,
        "httponly": True,
        "secure": settings.session_cookie_secure,
        "samesite": samesite,
        "path": "/",
    }


# Cookie utility functions


def get_session_token(request: Request) -> str | None:
    """Extract session token from X-Session-Token header or cookie.

    Checks header first (works when third-party cookies are blocked),
    then falls back to cookie.

    Args:
        request: FastAPI request object.

    Returns:
        str | None: The session token or None if not present.
    """
    header_token = request.headers.get("x-session-token")
    if header_token:
        return header_token

    config = get_session_cookie_config()
    return request.cookies.get(config["key"])


def set_session_cookie(response: Response, token: str) -> None:
    """Set session cookie on response.

    Args:
        response: FastAPI response object.
        token: The session token to set.
    """
    config = get_session_cookie_config()
    response.set_cookie(
        key=config["key"],
        value=token,
        max_age=config["max_age"],
        httponly=config["httponly"],
        secure=config["secure"],
        samesite=config["samesite"],
        path=config["path"],
    )


def clear_session_cookie(response: Response) -> None:
    """Clear session cookie from response."""
    config = get_session_cookie_config()
    response.delete_cookie(
        key=config["key"],
        path=config["path"],
    )


# Session dependencies


async def get_current_session(
    request: Request,
    sessions: Annotated[SessionService, Depends(get_session_service)],
) -> AuthSession:
    """Resolve the signed-in session from the cookie or header.

    Raises:
        AuthenticationError: If no valid session is present.
    """
    token = get_session_token(request)
    session = sessions.get(token) if token else None
    if session is None or not session.is_authenticated:
        raise AuthenticationError("Please sign in to continue.")
    return session


async def get_optional_session(
    request: Request,
    sessions: Annotated[SessionService, Depends(get_session_service)],
) -> AuthSession | None:
    """Resolve the session if there is one, without requiring it."""
    token = get_session_token(request)
    return sessions.get(token) if token else None


CurrentSession = Annotated[AuthSession, Depends(get_current_session)]
OptionalSession = Annotated[AuthSession | None, Depends(get_optional_session)]


async def require_admin(session: CurrentSession) -> AuthSession:
    """Require an admin account.

    Raises:
        AuthorizationError: If the account is not an admin.
    """
    if not session.has_role("admin"):
        raise AuthorizationError("Access Denied: You must be an admin to view this page.")
    return session


AdminSession = Annotated[AuthSession, Depends(require_admin)]


# Service dependencies

ApiClient = Annotated[GigsApiClient, Depends(get_api_client)]
Sessions = Annotated[SessionService, Depends(get_session_service)]
Editors = Annotated[EditorRegistry, Depends(get_editor_registry)]
Previews = Annotated[PreviewRegistry, Depends(get_preview_registry)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_media_resolver(settings: AppSettings) -> MediaUrlResolver:
    return MediaUrlResolver(settings.storage_base_url)


MediaResolver = Annotated[MediaUrlResolver, Depends(get_media_resolver)]


# Profile dependencies


async def get_schema_for_session(
    session: CurrentSession,
    kind: Annotated[ProfileKind, Path(description="Profile variant")],
) -> ProfileSchema:
    """The field mapping for `kind`, if the account's role may edit it.

    Raises:
        AuthorizationError: If the account has the wrong role.
    """
    schema = get_profile_schema(kind)
    if not session.has_role(schema.required_role):
        raise AuthorizationError(f"Only {schema.required_role} accounts can manage a {schema.label} profile.")
    return schema


ProfileSchemaDep = Annotated[ProfileSchema, Depends(get_schema_for_session)]


async def get_open_editor(
    session: CurrentSession,
    schema: ProfileSchemaDep,
    editors: Editors,
) -> ProfileEditor:
    """The session's open editor for the requested variant.

    Raises:
        NotFoundError: If no editor is open; open one first.
    """
    editor = editors.get(session.session_id, schema.kind)
    if editor is None:
        raise NotFoundError(f"No {schema.label} profile editor is open.")
    return editor


OpenEditor = Annotated[ProfileEditor, Depends(get_open_editor)]
