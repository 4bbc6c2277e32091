"""Profile API routes: read the current profile and drive its editor.

Every editor route operates on the session's open editor for the variant
in the path (`artist` or `host`). Opening the editor always fetches the
profile fresh; nothing is sent upstream until save.
"""

import logging

from fastapi import APIRouter, File, UploadFile, status

from gigslk.api.deps import (
    ApiClient,
    AppSettings,
    CurrentSession,
    Editors,
    OpenEditor,
    Previews,
    ProfileSchemaDep,
)
from gigslk.schemas.common import MessageResponse
from gigslk.schemas.profile import (
    EditorStateResponse,
    FieldUpdateRequest,
    FlagResponse,
    GalleryRemoveRequest,
    GalleryStageResponse,
    ProfileView,
    SaveResponse,
    TagRequest,
)
from gigslk.services.media import MediaUrlResolver, StagedFile
from gigslk.services.notices import NoticeLevel
from gigslk.services.profile_editor import ProfileEditor
from gigslk.services.profile_fetcher import ProfileFetcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles/{kind}", tags=["profiles"])


async def read_upload(upload: UploadFile) -> StagedFile:
    content = await upload.read()
    return StagedFile(
        filename=upload.filename or "upload",
        content_type=upload.content_type or "application/octet-stream",
        content=content,
    )


def editor_state(editor: ProfileEditor) -> EditorStateResponse:
    return EditorStateResponse.from_editor(editor)


@router.get(
    "/me",
    response_model=ProfileView,
    summary="Get my profile",
    description="Fetches the signed-in account's profile with defaults applied. Does not open an editor.",
)
async def get_my_profile(
    session: CurrentSession,
    schema: ProfileSchemaDep,
    api: ApiClient,
    settings: AppSettings,
) -> ProfileView:
    fetcher = ProfileFetcher(schema, api, MediaUrlResolver(settings.storage_base_url))
    profile = await fetcher.fetch(session)
    return ProfileView.from_profile(profile, schema)


@router.post(
    "/editor",
    response_model=EditorStateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open the profile editor",
    description=(
        "Fetches the profile fresh and opens an editor for it, replacing any editor "
        "already open. A missing profile opens directly in creation mode."
    ),
)
async def open_editor(
    session: CurrentSession,
    schema: ProfileSchemaDep,
    api: ApiClient,
    editors: Editors,
    previews: Previews,
    settings: AppSettings,
) -> EditorStateResponse:
    editor = ProfileEditor(schema, session, api, previews, settings)
    await editors.open(editor)
    return editor_state(editor)


@router.get("/editor", response_model=EditorStateResponse, summary="Get editor state")
async def get_editor(editor: OpenEditor) -> EditorStateResponse:
    return editor_state(editor)


@router.delete(
    "/editor",
    response_model=MessageResponse,
    summary="Close the profile editor",
    description="Discards unsaved edits and staged files.",
)
async def close_editor(session: CurrentSession, schema: ProfileSchemaDep, editors: Editors) -> MessageResponse:
    editors.close(session.session_id, schema.kind)
    return MessageResponse(message="Editor closed.")


@router.post("/editor/edit", response_model=EditorStateResponse, summary="Enter edit mode")
async def begin_edit(editor: OpenEditor) -> EditorStateResponse:
    editor.begin_edit()
    return editor_state(editor)


@router.patch(
    "/editor/fields",
    response_model=EditorStateResponse,
    summary="Update fields",
    description="Replaces the given field values. Read-only and unknown fields are rejected.",
)
async def update_fields(request: FieldUpdateRequest, editor: OpenEditor) -> EditorStateResponse:
    editor.set_fields(request.values)
    return editor_state(editor)


@router.post("/editor/flags/{field}/toggle", response_model=FlagResponse, summary="Toggle a flag")
async def toggle_flag(field: str, editor: OpenEditor) -> FlagResponse:
    return FlagResponse(field=field, value=editor.toggle_flag(field))


@router.post(
    "/editor/tags/{field}",
    response_model=EditorStateResponse,
    summary="Add a tag",
    description="Trims the tag and appends it unless it is blank or already present.",
)
async def add_tag(field: str, request: TagRequest, editor: OpenEditor) -> EditorStateResponse:
    editor.add_tag(field, request.tag)
    return editor_state(editor)


@router.post("/editor/tags/{field}/remove", response_model=EditorStateResponse, summary="Remove a tag")
async def remove_tag(field: str, request: TagRequest, editor: OpenEditor) -> EditorStateResponse:
    editor.remove_tag(field, request.tag)
    return editor_state(editor)


@router.post(
    "/editor/avatar",
    response_model=EditorStateResponse,
    summary="Stage a new avatar",
    description="Replaces any pending avatar. Files over the upload limit are rejected with 413.",
)
async def stage_avatar(editor: OpenEditor, file: UploadFile = File(...)) -> EditorStateResponse:
    editor.stage_avatar(await read_upload(file))
    return editor_state(editor)


@router.delete("/editor/avatar", response_model=EditorStateResponse, summary="Remove the avatar")
async def clear_avatar(editor: OpenEditor) -> EditorStateResponse:
    editor.clear_avatar()
    return editor_state(editor)


@router.post(
    "/editor/gallery",
    response_model=GalleryStageResponse,
    summary="Stage gallery images",
    description="Appends each file to the gallery. Oversized files are skipped and reported.",
)
async def stage_gallery(editor: OpenEditor, files: list[UploadFile] = File(...)) -> GalleryStageResponse:
    staged, rejected = editor.stage_gallery([await read_upload(upload) for upload in files])
    return GalleryStageResponse(
        staged=[EditorStateResponse.media_entry(editor, entry) for entry in staged],
        rejected=[file.filename for file in rejected],
        editor=editor_state(editor),
    )


@router.post(
    "/editor/gallery/remove",
    response_model=EditorStateResponse,
    summary="Remove a gallery image",
    description="Pending images are discarded; stored images are left out of the next save.",
)
async def remove_gallery_entry(request: GalleryRemoveRequest, editor: OpenEditor) -> EditorStateResponse:
    if request.kind == "pending":
        entry = editor.find_gallery_entry(handle=request.ref)
    else:
        entry = editor.find_gallery_entry(url=request.ref)
    editor.remove_gallery_entry(entry)
    return editor_state(editor)


@router.post(
    "/editor/cancel",
    response_model=EditorStateResponse,
    summary="Cancel editing",
    description="Reverts to the last fetched profile and discards staged files.",
)
async def cancel_edit(editor: OpenEditor) -> EditorStateResponse:
    editor.cancel()
    return editor_state(editor)


@router.post(
    "/editor/save",
    response_model=SaveResponse,
    summary="Save the profile",
    description=(
        "Submits the working copy and staged files, then re-fetches the profile. "
        "On failure the working copy is kept and the error is also posted as a notice."
    ),
)
async def save_profile(editor: OpenEditor) -> SaveResponse:
    message = await editor.save()
    return SaveResponse(message=message, editor=editor_state(editor))


@router.delete("/editor/notices/{level}", response_model=EditorStateResponse, summary="Dismiss a notice")
async def dismiss_notice(level: NoticeLevel, editor: OpenEditor) -> EditorStateResponse:
    editor.notices.dismiss(level)
    return editor_state(editor)
