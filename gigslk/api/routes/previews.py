"""Serves staged files to the session that staged them."""

from fastapi import APIRouter, Response

from gigslk.api.deps import CurrentSession, Previews
from gigslk.api.middleware.error_handler import NotFoundError

router = APIRouter(prefix="/previews", tags=["previews"])


@router.get(
    "/{handle}",
    response_class=Response,
    summary="Preview a staged file",
    description="Returns the raw bytes of a file staged but not yet saved. Only the owning session can read it.",
)
async def get_preview(handle: str, session: CurrentSession, previews: Previews) -> Response:
    file = previews.get(handle, owner=session.session_id)
    if file is None:
        raise NotFoundError("Preview not found.")
    # Only raster images are rendered inline; SVG can carry script.
    inline = file.content_type.startswith("image/") and file.content_type != "image/svg+xml"
    media_type = file.content_type if inline else "application/octet-stream"
    return Response(
        content=file.content,
        media_type=media_type,
        headers={"Cache-Control": "private, no-store", "X-Content-Type-Options": "nosniff"},
    )
