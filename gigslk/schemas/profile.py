"""Profile view and editor schemas."""

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

from gigslk.services.media import MediaRef, PendingMedia
from gigslk.services.profile_fields import ProfileKind

if TYPE_CHECKING:
    from gigslk.services.profile_editor import ProfileEditor
    from gigslk.services.profile_fetcher import Profile
    from gigslk.services.profile_fields import ProfileSchema


class MediaEntryResponse(BaseModel):
    """One avatar or gallery entry as displayed."""

    kind: Literal["persisted", "pending"] = Field(description="Stored upstream, or staged here")
    url: str = Field(description="Display URL (a preview URL for pending entries)")
    ref: str = Field(description="Persisted URL or preview handle, used to remove the entry")
    filename: str | None = Field(default=None, description="Original filename of a pending file")
    size: int | None = Field(default=None, description="Size in bytes of a pending file")


class NoticeResponse(BaseModel):
    level: Literal["success", "error", "info"] = Field(description="Notice level")
    message: str = Field(description="Text shown to the user")


class ProfileView(BaseModel):
    """A fetched profile, defaults applied and media absolutized."""

    kind: ProfileKind = Field(description="Profile variant")
    owner_id: int | str = Field(description="Owning account ID")
    record_id: int | str | None = Field(default=None, description="Upstream profile ID")
    exists: bool = Field(description="False when no profile has been saved yet")
    fields: dict[str, Any] = Field(description="Every profile field by name")
    avatar_url: str = Field(description="Avatar URL or placeholder")
    gallery: list[str] = Field(default_factory=list, description="Gallery URLs in order")

    @classmethod
    def from_profile(cls, profile: "Profile", schema: "ProfileSchema") -> "ProfileView":
        return cls(
            kind=profile.kind,
            owner_id=profile.owner_id,
            record_id=profile.record_id,
            exists=profile.exists,
            fields=dict(profile.fields),
            avatar_url=profile.avatar.url if profile.avatar else schema.placeholder_avatar,
            gallery=[entry.url for entry in profile.gallery],
        )


class EditorStateResponse(BaseModel):
    """Everything the editing screen renders."""

    kind: ProfileKind = Field(description="Profile variant")
    mode: Literal["viewing", "editing", "creating", "saving"] = Field(description="Editor state")
    is_editing: bool = Field(description="Whether edit controls are enabled")
    is_new: bool = Field(description="Whether the profile has never been saved")
    is_saving: bool = Field(description="Whether a save is in flight")
    is_dirty: bool = Field(description="Whether the buffer differs from the last fetch")
    fields: dict[str, Any] = Field(description="Working values of every field")
    avatar: MediaEntryResponse | None = Field(default=None, description="Current avatar, if any")
    avatar_url: str = Field(description="Avatar display URL or placeholder")
    gallery: list[MediaEntryResponse] = Field(default_factory=list, description="Gallery in display order")
    notices: list[NoticeResponse] = Field(default_factory=list, description="Live notices")

    @staticmethod
    def media_entry(editor: "ProfileEditor", entry: MediaRef) -> MediaEntryResponse:
        if isinstance(entry, PendingMedia):
            return MediaEntryResponse(
                kind="pending",
                url=editor.display_url(entry),
                ref=entry.handle,
                filename=entry.file.filename,
                size=entry.file.size,
            )
        return MediaEntryResponse(kind="persisted", url=entry.url, ref=entry.url)

    @classmethod
    def from_editor(cls, editor: "ProfileEditor") -> "EditorStateResponse":
        buffer = editor.require_loaded()
        return cls(
            kind=editor.schema.kind,
            mode=editor.mode,
            is_editing=editor.is_editing,
            is_new=editor.is_new,
            is_saving=editor.is_saving,
            is_dirty=buffer.is_dirty,
            fields={name: list(v) if isinstance(v, list) else v for name, v in buffer.fields.items()},
            avatar=cls.media_entry(editor, buffer.avatar) if buffer.avatar else None,
            avatar_url=editor.display_url(buffer.avatar),
            gallery=[cls.media_entry(editor, entry) for entry in buffer.gallery],
            notices=[
                NoticeResponse(level=notice.level.value, message=notice.message)
                for notice in editor.notices.active()
            ],
        )


class FieldUpdateRequest(BaseModel):
    """Replace one or more field values."""

    values: dict[str, Any] = Field(description="New values keyed by field name")


class TagRequest(BaseModel):
    tag: str = Field(description="Tag text")


class GalleryRemoveRequest(BaseModel):
    """Identify a gallery entry by variant and reference."""

    kind: Literal["persisted", "pending"] = Field(description="Entry variant")
    ref: str = Field(description="Persisted URL or preview handle")


class FlagResponse(BaseModel):
    field: str
    value: bool


class GalleryStageResponse(BaseModel):
    staged: list[MediaEntryResponse] = Field(default_factory=list, description="Newly staged entries")
    rejected: list[str] = Field(default_factory=list, description="Filenames rejected as too large")
    editor: EditorStateResponse


class SaveResponse(BaseModel):
    message: str = Field(description="Success message")
    editor: EditorStateResponse
