"""Process-local registry of open profile editors."""

from __future__ import annotations

import asyncio
import logging
from threading import Lock

from gigslk.core.config import get_settings
from gigslk.services.profile_editor import ProfileEditor
from gigslk.services.profile_fields import ProfileKind

logger = logging.getLogger(__name__)

EditorKey = tuple[str, ProfileKind]


class EditorRegistry:
    """Open editors keyed by (session id, profile kind), with idle expiry."""

    def __init__(self, idle_ttl_seconds: int = 3600, cleanup_interval_seconds: int = 300) -> None:
        self.idle_ttl_seconds = idle_ttl_seconds
        self.cleanup_interval_seconds = cleanup_interval_seconds
        self._editors: dict[EditorKey, ProfileEditor] = {}
        self._lock = Lock()
        self._cleanup_task: asyncio.Task | None = None

    async def open(self, editor: ProfileEditor) -> ProfileEditor:
        """Load `editor` and make it the session's editor for its kind.

        The profile is always fetched fresh. A previously open editor for
        the same key is closed. If loading fails nothing is registered.
        """
        key = (editor.session.session_id, editor.schema.kind)
        try:
            await editor.load()
        except Exception:
            editor.close()
            raise
        with self._lock:
            previous = self._editors.get(key)
            self._editors[key] = editor
        if previous is not None and previous is not editor:
            previous.close()
        return editor

    def get(self, session_id: str, kind: ProfileKind) -> ProfileEditor | None:
        with self._lock:
            editor = self._editors.get((session_id, kind))
        if editor is not None:
            editor.touch()
        return editor

    def close(self, session_id: str, kind: ProfileKind) -> bool:
        with self._lock:
            editor = self._editors.pop((session_id, kind), None)
        if editor is None:
            return False
        editor.close()
        return True

    def close_session(self, session_id: str) -> int:
        """Close every editor a session has open.

        Returns:
            Number of editors closed.
        """
        with self._lock:
            keys = [key for key in self._editors if key[0] == session_id]
            editors = [self._editors.pop(key) for key in keys]
        for editor in editors:
            editor.close()
        return len(editors)

    def cleanup(self) -> int:
        """Close editors idle longer than the TTL; a save in flight keeps one alive."""
        with self._lock:
            keys = [
                key
                for key, editor in self._editors.items()
                if not editor.is_saving and editor.idle_for() > self.idle_ttl_seconds
            ]
            editors = [self._editors.pop(key) for key in keys]
        for editor in editors:
            editor.close()
        return len(editors)

    def clear(self) -> int:
        with self._lock:
            editors = list(self._editors.values())
            self._editors.clear()
        for editor in editors:
            editor.close()
        return len(editors)

    def __len__(self) -> int:
        with self._lock:
            return len(self._editors)

    async def start_cleanup_task(self) -> None:
        """Start background cleanup task."""
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.info("Editor cleanup task started")

    async def stop_cleanup_task(self) -> None:
        """Stop background cleanup task."""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
            logger.info("Editor cleanup task stopped")

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self.cleanup_interval_seconds)
            count = self.cleanup()
            if count > 0:
                logger.debug("Closed %d idle editors", count)


_editor_registry: EditorRegistry | None = None


def get_editor_registry() -> EditorRegistry:
    """Get or create the global editor registry."""
    global _editor_registry
    if _editor_registry is None:
        settings = get_settings()
        _editor_registry = EditorRegistry(
            idle_ttl_seconds=settings.editor_idle_ttl_seconds,
            cleanup_interval_seconds=settings.cleanup_interval_seconds,
        )
    return _editor_registry


async def init_editor_registry() -> EditorRegistry:
    """Initialize editor registry with cleanup task. Call at app startup."""
    registry = get_editor_registry()
    await registry.start_cleanup_task()
    return registry


async def shutdown_editor_registry() -> None:
    """Stop the cleanup task and close every open editor. Call at app shutdown."""
    if _editor_registry:
        await _editor_registry.stop_cleanup_task()
        _editor_registry.clear()
