"""Authentication API routes: sign-in, registration and sign-out."""

import logging

from fastapi import APIRouter, Response, status

from gigslk.api.deps import (
    ApiClient,
    CurrentSession,
    OptionalSession,
    Sessions,
    clear_session_cookie,
    set_session_cookie,
)
from gigslk.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, SessionResponse
from gigslk.schemas.common import MessageResponse
from gigslk.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Sign in",
    description="Signs in against the marketplace backend and starts a session.",
)
async def login(request: LoginRequest, response: Response, api: ApiClient, sessions: Sessions) -> LoginResponse:
    """Sign in with email and password.

    The session token is set as a cookie and also returned in the body and
    the `x-session-token` header for clients that cannot keep cookies.
    """
    session = await AuthService(api, sessions).login(request.email, request.password)
    set_session_cookie(response, session.session_id)
    response.headers["x-session-token"] = session.session_id
    return LoginResponse(session_token=session.session_id, user=session.user)


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Creates a performer or host account. Sign in afterwards.",
)
async def register(request: RegisterRequest, api: ApiClient, sessions: Sessions) -> MessageResponse:
    message = await AuthService(api, sessions).register(request)
    return MessageResponse(message=message)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Sign out",
    description="Ends the session, closing open editors and discarding staged files.",
)
async def logout(
    response: Response,
    session: OptionalSession,
    api: ApiClient,
    sessions: Sessions,
) -> MessageResponse:
    if session is not None:
        AuthService(api, sessions).logout(session.session_id)
    clear_session_cookie(response)
    return MessageResponse(message="Signed out.")


@router.get(
    "/me",
    response_model=SessionResponse,
    summary="Current account",
    description="Returns the signed-in account.",
)
async def me(session: CurrentSession) -> SessionResponse:
    return SessionResponse(user=session.user)
