"""Media Staging Area: files chosen for upload but not yet saved.

Every pending entry owns a preview handle in the PreviewRegistry. The
staging area is the only place handles are created for an editor, and it
releases each one as soon as nothing references it any more.
"""

import logging

from gigslk.api.middleware.error_handler import UploadTooLargeError
from gigslk.services.edit_buffer import EditBuffer
from gigslk.services.media import MediaRef, PendingMedia, PersistedMedia, StagedFile
from gigslk.services.preview_registry import PreviewRegistry

logger = logging.getLogger(__name__)

MEGABYTE = 1024 * 1024


class MediaStagingArea:
    """Pending avatar and gallery files for one editor."""

    def __init__(self, previews: PreviewRegistry, owner: str, max_bytes: int = 5 * MEGABYTE) -> None:
        self.previews = previews
        self.owner = owner
        self.max_bytes = max_bytes
        self.pending_avatar: PendingMedia | None = None
        self.pending_gallery: list[PendingMedia] = []

    @property
    def limit_label(self) -> str:
        return f"{max(1, self.max_bytes // MEGABYTE)}MB"

    @property
    def avatar_too_large_message(self) -> str:
        return f"Profile picture must be less than {self.limit_label}"

    @property
    def gallery_too_large_message(self) -> str:
        return f"Gallery images must be less than {self.limit_label} each"

    def accepts(self, file: StagedFile) -> bool:
        """A file of exactly the limit is accepted."""
        return file.size <= self.max_bytes

    def _stage(self, file: StagedFile) -> PendingMedia:
        return PendingMedia(handle=self.previews.create(self.owner, file), file=file)

    def _release(self, entry: PendingMedia) -> None:
        self.previews.release(entry.handle)

    def stage_avatar(self, buffer: EditBuffer, file: StagedFile) -> PendingMedia:
        """Make `file` the pending avatar, discarding any previous one.

        Raises:
            UploadTooLargeError: The file is over the limit; nothing changes.
        """
        if not self.accepts(file):
            raise UploadTooLargeError(
                self.avatar_too_large_message,
                details=[{"loc": ["avatar", file.filename], "msg": self.avatar_too_large_message, "type": "size"}],
            )
        if self.pending_avatar is not None:
            self._release(self.pending_avatar)
        self.pending_avatar = self._stage(file)
        buffer.avatar = self.pending_avatar
        logger.debug("Staged avatar %s (%d bytes)", file.filename, file.size)
        return self.pending_avatar

    def clear_avatar(self, buffer: EditBuffer) -> None:
        """Remove the avatar entirely; the next save clears it upstream."""
        if self.pending_avatar is not None:
            self._release(self.pending_avatar)
            self.pending_avatar = None
        buffer.avatar = None

    def stage_gallery(
        self, buffer: EditBuffer, files: list[StagedFile]
    ) -> tuple[list[PendingMedia], list[StagedFile]]:
        """Append each acceptable file to the gallery.

        Oversized files are skipped individually; the rest are staged in
        the order given, after any earlier pending files.

        Returns:
            The staged entries and the rejected files.
        """
        staged: list[PendingMedia] = []
        rejected: list[StagedFile] = []
        for file in files:
            if not self.accepts(file):
                logger.info("Rejected gallery file %s (%d bytes)", file.filename, file.size)
                rejected.append(file)
                continue
            entry = self._stage(file)
            self.pending_gallery.append(entry)
            buffer.gallery.append(entry)
            staged.append(entry)
        return staged, rejected

    def remove(self, buffer: EditBuffer, entry: MediaRef) -> bool:
        """Drop a gallery entry.

        A pending entry leaves both the buffer and the pending files and
        its preview is released. A persisted entry only leaves the buffer.

        Returns:
            False if the entry was not in the gallery.
        """
        if entry not in buffer.gallery:
            return False
        buffer.gallery.remove(entry)
        if isinstance(entry, PendingMedia):
            if entry in self.pending_gallery:
                self.pending_gallery.remove(entry)
            self._release(entry)
        return True

    def find(self, buffer: EditBuffer, *, handle: str | None = None, url: str | None = None) -> MediaRef | None:
        """Locate a gallery entry by preview handle or persisted URL."""
        for entry in buffer.gallery:
            if handle is not None and isinstance(entry, PendingMedia) and entry.handle == handle:
                return entry
            if url is not None and isinstance(entry, PersistedMedia) and entry.url == url:
                return entry
        return None

    def oversized(self) -> list[StagedFile]:
        """Pending files over the limit; empty unless the limit changed."""
        files = [entry.file for entry in self.pending_gallery]
        if self.pending_avatar is not None:
            files.insert(0, self.pending_avatar.file)
        return [file for file in files if not self.accepts(file)]

    def display_url(self, entry: MediaRef) -> str:
        if isinstance(entry, PendingMedia):
            return self.previews.display_url(entry.handle)
        return entry.url

    @property
    def handles(self) -> list[str]:
        handles = [entry.handle for entry in self.pending_gallery]
        if self.pending_avatar is not None:
            handles.insert(0, self.pending_avatar.handle)
        return handles

    @property
    def is_empty(self) -> bool:
        return self.pending_avatar is None and not self.pending_gallery

    def clear(self) -> int:
        """Forget every pending file and release its preview.

        Returns:
            Number of previews released.
        """
        released = 0
        for handle in self.handles:
            if self.previews.release(handle):
                released += 1
        self.pending_avatar = None
        self.pending_gallery = []
        return released
