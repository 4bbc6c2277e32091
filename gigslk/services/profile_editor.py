"""Profile Editor: one editing session over an artist or host profile.

The editor ties the fetcher, edit buffer, staging area and serializer
together and owns the view/edit/save states. Viewing moves to editing on
begin_edit; a successful save re-fetches and returns to viewing; a failed
save stays in editing with nothing changed; cancel returns to viewing from
the last fetch. A fetch that finds no profile lands directly in editing
("creating").
"""

import logging
import time
from typing import Any, Callable

from gigslk.api.middleware.error_handler import (
    AuthenticationError,
    ConflictError,
    FetchError,
    NotFoundError,
    SaveError,
    UploadTooLargeError,
)
from gigslk.core.config import Settings, get_settings
from gigslk.services.edit_buffer import EditBuffer
from gigslk.services.gigs_api_client import GigsApiClient
from gigslk.services.media import MediaRef, MediaUrlResolver, PendingMedia, StagedFile
from gigslk.services.media_staging import MediaStagingArea
from gigslk.services.notices import NoticeBoard, NoticeLevel
from gigslk.services.preview_registry import PreviewRegistry
from gigslk.services.profile_fetcher import Profile, ProfileFetcher
from gigslk.services.profile_fields import ProfileSchema
from gigslk.services.save_serializer import serialize_profile
from gigslk.services.session_service import AuthSession

logger = logging.getLogger(__name__)

NEW_PROFILE_NOTICE = "No existing profile found. Please fill out your details and save."
SAVED_NOTICE = "Profile saved successfully!"


class ProfileEditor:
    """Editing state for one session and one profile variant."""

    def __init__(
        self,
        schema: ProfileSchema,
        session: AuthSession,
        api: GigsApiClient,
        previews: PreviewRegistry,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.schema = schema
        self.session = session
        self.api = api
        self.settings = settings or get_settings()
        self.clock = clock
        self.resolver = MediaUrlResolver(self.settings.storage_base_url)
        self.fetcher = ProfileFetcher(schema, api, self.resolver)
        self.staging = MediaStagingArea(previews, session.session_id, self.settings.max_upload_bytes)
        self.notices = NoticeBoard(clock)
        self.profile: Profile | None = None
        self.buffer: EditBuffer | None = None
        self.is_editing = False
        self.is_saving = False
        self.closed = False
        self.last_used = clock()

    # State

    @property
    def is_loaded(self) -> bool:
        return self.buffer is not None

    @property
    def is_new(self) -> bool:
        return self.profile is not None and not self.profile.exists

    @property
    def mode(self) -> str:
        if self.is_saving:
            return "saving"
        if self.is_editing:
            return "creating" if self.is_new else "editing"
        return "viewing"

    def touch(self) -> None:
        self.last_used = self.clock()

    def idle_for(self) -> float:
        return self.clock() - self.last_used

    def _post_error(self, message: str) -> None:
        self.notices.post(NoticeLevel.ERROR, message, self.settings.error_notice_seconds)

    def require_loaded(self) -> EditBuffer:
        if self.buffer is None:
            raise ConflictError("Profile has not been loaded yet.")
        return self.buffer

    def _editing(self) -> EditBuffer:
        buffer = self.require_loaded()
        if self.is_saving:
            raise ConflictError("A save is in progress.")
        if not self.is_editing:
            raise ConflictError("Profile is not in edit mode.")
        return buffer

    # Loading

    async def load(self) -> Profile:
        """Fetch the profile fresh and start over from it.

        Any pending files are discarded. A missing profile puts the editor
        straight into edit mode with every field at its default.
        """
        try:
            profile = await self.fetcher.fetch(self.session)
        except FetchError as e:
            self._post_error(e.message)
            raise
        self._adopt(profile)
        self.is_editing = not profile.exists
        if not profile.exists:
            self.notices.post(NoticeLevel.INFO, NEW_PROFILE_NOTICE)
        return profile

    def _adopt(self, profile: Profile) -> None:
        self.staging.clear()
        self.profile = profile
        if self.buffer is None:
            self.buffer = EditBuffer(self.schema, profile)
        else:
            self.buffer.reset(profile)

    def begin_edit(self) -> None:
        self.require_loaded()
        if self.is_saving:
            raise ConflictError("A save is in progress.")
        self.is_editing = True

    # Field mutations

    def set_field(self, name: str, value: Any) -> None:
        self._editing().set_field(name, value)

    def set_fields(self, values: dict[str, Any]) -> None:
        """Apply several field updates; none is applied if any name is invalid."""
        buffer = self._editing()
        for name in values:
            buffer.editable_spec(name)
        for name, value in values.items():
            buffer.set_field(name, value)

    def add_tag(self, name: str, tag: str) -> bool:
        return self._editing().add_tag(name, tag)

    def remove_tag(self, name: str, tag: str) -> bool:
        return self._editing().remove_tag(name, tag)

    def toggle_flag(self, name: str) -> bool:
        return self._editing().toggle_flag(name)

    # Media

    def stage_avatar(self, file: StagedFile) -> PendingMedia:
        buffer = self._editing()
        try:
            return self.staging.stage_avatar(buffer, file)
        except UploadTooLargeError as e:
            self._post_error(e.message)
            raise

    def clear_avatar(self) -> None:
        self.staging.clear_avatar(self._editing())

    def stage_gallery(self, files: list[StagedFile]) -> tuple[list[PendingMedia], list[StagedFile]]:
        """Stage gallery files; oversized ones are skipped with an error notice."""
        staged, rejected = self.staging.stage_gallery(self._editing(), files)
        if rejected:
            self._post_error(self.staging.gallery_too_large_message)
        return staged, rejected

    def remove_gallery_entry(self, entry: MediaRef) -> None:
        if not self.staging.remove(self._editing(), entry):
            raise NotFoundError("Gallery image not found.")

    def find_gallery_entry(self, *, handle: str | None = None, url: str | None = None) -> MediaRef:
        entry = self.staging.find(self.require_loaded(), handle=handle, url=url)
        if entry is None:
            raise NotFoundError("Gallery image not found.")
        return entry

    def display_url(self, entry: MediaRef | None) -> str:
        if entry is None:
            return self.schema.placeholder_avatar
        return self.staging.display_url(entry)

    # Leaving edit mode

    def cancel(self) -> None:
        """Discard every edit and pending file, back to the last fetch."""
        buffer = self.require_loaded()
        if self.is_saving:
            raise ConflictError("A save is in progress.")
        buffer.reset(self.profile)
        self.staging.clear()
        self.is_editing = False
        self.notices.clear()

    async def save(self) -> str:
        """Submit the buffer, then re-fetch to pick up stored media URLs.

        On failure the buffer and edit mode stay exactly as they were and
        the error is shown as a notice. Nothing is retried.

        Returns:
            The success message shown to the user.

        Raises:
            ConflictError: Not editing, or a save is already in flight.
            AuthenticationError: The session has no credential.
            UploadTooLargeError: A pending file is over the size limit.
            SaveError: The backend rejected the submission.
        """
        if self.is_saving:
            raise ConflictError("A save is already in progress.")
        buffer = self._editing()
        self.notices.clear()

        if not self.session.is_authenticated:
            self._post_error("You must be signed in to save your profile.")
            raise AuthenticationError("You must be signed in to save your profile.")
        oversized = self.staging.oversized()
        if oversized:
            message = self.staging.gallery_too_large_message
            if self.staging.pending_avatar is not None and self.staging.pending_avatar.file in oversized:
                message = self.staging.avatar_too_large_message
            self._post_error(message)
            raise UploadTooLargeError(message)

        payload = serialize_profile(self.schema, buffer, self.resolver)
        self.is_saving = True
        try:
            try:
                body = await self.api.put_profile(
                    self.schema.endpoint,
                    self.session.token,
                    payload,
                    fallback=f"Failed to save {self.schema.label} profile.",
                )
            except SaveError as e:
                logger.warning("Saving %s profile failed: %s", self.schema.label, e.message)
                self._post_error(e.message)
                raise

            message = body.get("message") if isinstance(body.get("message"), str) else None
            message = message or SAVED_NOTICE
            self.is_editing = False
            self.staging.clear()
            try:
                profile = await self.fetcher.fetch(self.session)
            except FetchError as e:
                # Saved, but the refreshed copy is unavailable; show the last fetch.
                logger.warning("Refreshing %s profile after save failed: %s", self.schema.label, e.message)
                buffer.reset(self.profile)
                self._post_error(e.message)
            else:
                self._adopt(profile)
            self.notices.post(NoticeLevel.SUCCESS, message, self.settings.success_notice_seconds)
            logger.info("Saved %s profile for account %s", self.schema.label, self.session.user.id)
            return message
        finally:
            self.is_saving = False

    def close(self) -> None:
        """Release every preview this editor holds."""
        self.staging.clear()
        self.notices.clear()
        self.closed = True
