"""Process-local registry of preview handles for staged files.

A handle stands in for a file that has been chosen but not uploaded yet,
and is what the display URL of a pending gallery entry or avatar points at.
Handles are created on staging and must be released when the entry is
removed, the edit is cancelled, or the editor refreshes after a save.
"""

import logging
import secrets
from dataclasses import dataclass
from threading import Lock

from gigslk.core.config import get_settings
from gigslk.services.media import StagedFile

logger = logging.getLogger(__name__)


@dataclass
class PreviewEntry:
    """A registered preview and the session allowed to see it."""

    owner: str
    file: StagedFile


class PreviewRegistry:
    """Thread-safe map of preview handles to staged files."""

    HANDLE_BYTES = 24

    def __init__(self, url_prefix: str = "/api/v1/previews") -> None:
        self.url_prefix = url_prefix.rstrip("/")
        self._entries: dict[str, PreviewEntry] = {}
        self._lock = Lock()

    def create(self, owner: str, file: StagedFile) -> str:
        """Register a staged file and return its new handle."""
        handle = secrets.token_urlsafe(self.HANDLE_BYTES)
        with self._lock:
            self._entries[handle] = PreviewEntry(owner=owner, file=file)
        logger.debug("Created preview %s for %s (%d bytes)", handle, file.filename, file.size)
        return handle

    def get(self, handle: str, owner: str | None = None) -> StagedFile | None:
        """Look up a staged file, optionally only if `owner` registered it."""
        with self._lock:
            entry = self._entries.get(handle)
        if entry is None or (owner is not None and entry.owner != owner):
            return None
        return entry.file

    def release(self, handle: str) -> bool:
        """Drop a handle. Returns False if it was already released."""
        with self._lock:
            released = self._entries.pop(handle, None) is not None
        if released:
            logger.debug("Released preview %s", handle)
        return released

    def release_owner(self, owner: str) -> int:
        """Drop every handle a session registered.

        Returns:
            Number of handles released.
        """
        with self._lock:
            handles = [h for h, entry in self._entries.items() if entry.owner == owner]
            for handle in handles:
                del self._entries[handle]
        if handles:
            logger.info("Released %d previews for session", len(handles))
        return len(handles)

    def display_url(self, handle: str) -> str:
        return f"{self.url_prefix}/{handle}"

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_preview_registry: PreviewRegistry | None = None


def get_preview_registry() -> PreviewRegistry:
    """Get or create the global preview registry."""
    global _preview_registry
    if _preview_registry is None:
        _preview_registry = PreviewRegistry(get_settings().preview_url_prefix)
    return _preview_registry
