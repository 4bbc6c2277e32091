"""In-memory session store for signed-in accounts.

A session is the explicit auth context every profile, directory and admin
operation receives: the upstream credential plus the account it belongs to.
It is created at sign-in, resolved from the session cookie on each request,
and destroyed at sign-out or after sitting idle past its TTL.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable

from gigslk.core.config import get_settings
from gigslk.schemas.auth import SessionUser

logger = logging.getLogger(__name__)


@dataclass
class AuthSession:
    """Credential and identity of one signed-in account."""

    session_id: str
    token: str | None
    user: SessionUser
    last_seen: float = field(default_factory=time.time)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def username(self) -> str | None:
        return self.user.username

    def has_role(self, role: str) -> bool:
        return self.user.role == role


class SessionService:
    """Thread-safe session store with idle expiry."""

    TOKEN_LENGTH = 64  # Length of session id in characters

    def __init__(
        self,
        ttl_seconds: int = 604800,
        cleanup_interval_seconds: int = 300,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.cleanup_interval_seconds = cleanup_interval_seconds
        self._sessions: dict[str, AuthSession] = {}
        self._lock = Lock()
        self._cleanup_task: asyncio.Task | None = None
        self._on_destroy: list[Callable[[str], Any]] = []

    def _generate_session_id(self) -> str:
        """Generate a cryptographically secure session id.

        Returns:
            str: A 64-character hex token.
        """
        return secrets.token_hex(self.TOKEN_LENGTH // 2)

    def on_destroy(self, callback: Callable[[str], Any]) -> None:
        """Register a callback run with the session id whenever a session ends."""
        self._on_destroy.append(callback)

    def create(self, token: str, user: SessionUser) -> AuthSession:
        """Start a session for a freshly signed-in account."""
        session = AuthSession(session_id=self._generate_session_id(), token=token, user=user)
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info("Session started for account %s (%s)", user.id, user.role)
        return session

    def get(self, session_id: str) -> AuthSession | None:
        """Resolve a session id, refreshing its idle timer.

        Returns:
            The session, or None if unknown or expired.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if self._is_expired(session):
                expired = True
            else:
                session.last_seen = time.time()
                expired = False
        if expired:
            self.destroy(session_id)
            return None
        return session

    def touch(self, session_id: str) -> bool:
        """Refresh a session's idle timer without resolving it."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            session.last_seen = time.time()
            return True

    def destroy(self, session_id: str) -> bool:
        """End a session and release everything tied to it."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        for callback in self._on_destroy:
            callback(session_id)
        logger.info("Session ended for account %s", session.user.id)
        return True

    def _is_expired(self, session: AuthSession) -> bool:
        return time.time() - session.last_seen > self.ttl_seconds

    def cleanup(self) -> int:
        """Destroy every expired session.

        Returns:
            Number of sessions removed.
        """
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if self._is_expired(s)]
        for session_id in expired:
            self.destroy(session_id)
        return len(expired)

    def clear(self) -> int:
        with self._lock:
            session_ids = list(self._sessions)
        for session_id in session_ids:
            self.destroy(session_id)
        return len(session_ids)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    async def start_cleanup_task(self) -> None:
        """Start background cleanup task."""
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.info("Session cleanup task started")

    async def stop_cleanup_task(self) -> None:
        """Stop background cleanup task."""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
            logger.info("Session cleanup task stopped")

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self.cleanup_interval_seconds)
            count = self.cleanup()
            if count > 0:
                logger.debug("Expired %d idle sessions", count)


_session_service: SessionService | None = None


def get_session_service() -> SessionService:
    """Get or create the global session store."""
    global _session_service
    if _session_service is None:
        settings = get_settings()
        _session_service = SessionService(
            ttl_seconds=settings.session_ttl_seconds,
            cleanup_interval_seconds=settings.cleanup_interval_seconds,
        )
    return _session_service


async def init_session_service() -> SessionService:
    """Initialize session store with cleanup task. Call at app startup."""
    service = get_session_service()
    await service.start_cleanup_task()
    return service


async def shutdown_session_service() -> None:
    """Stop the session cleanup task. Call at app shutdown."""
    if _session_service:
        await _session_service.stop_cleanup_task()
