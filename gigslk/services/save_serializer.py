"""Save Serializer: turn an edit buffer into one profile submission."""

import json
from typing import Any

from gigslk.services.edit_buffer import EditBuffer
from gigslk.services.gigs_api_client import MultipartPayload
from gigslk.services.media import MediaUrlResolver, PendingMedia, PersistedMedia
from gigslk.services.profile_fields import FieldKind, ProfileSchema, format_number


def encode_field(schema: ProfileSchema, kind: FieldKind, value: Any) -> str:
    if kind is FieldKind.NUMBER:
        return format_number(value)
    if kind is FieldKind.FLAG:
        return schema.flag_encoding.encode(bool(value))
    if kind is FieldKind.TAGS:
        return json.dumps(list(value))
    return "" if value is None else str(value)


def serialize_profile(
    schema: ProfileSchema,
    buffer: EditBuffer,
    resolver: MediaUrlResolver,
) -> MultipartPayload:
    """Build the multipart submission for a profile save.

    Every editable field is sent as one named value. The avatar goes up as
    a file when one is pending, else as its storage-relative URL, else as
    an empty value to clear it. Persisted gallery entries are sent as one
    JSON list of storage-relative paths; pending ones as files, in gallery
    order. Read-only stats are never sent.
    """
    payload = MultipartPayload()
    for spec in schema.editable_fields:
        payload.add(spec.name, encode_field(schema, spec.kind, buffer.fields.get(spec.name)))

    avatar = buffer.avatar
    if isinstance(avatar, PendingMedia):
        payload.attach(
            schema.avatar_upload_field,
            avatar.file.filename,
            avatar.file.content,
            avatar.file.content_type,
        )
    elif isinstance(avatar, PersistedMedia) and not resolver.is_placeholder(avatar.url):
        payload.add(schema.avatar_url_field, resolver.relativize(avatar.url))
    else:
        payload.add(schema.avatar_url_field, "")

    existing = [resolver.relativize(entry.url) for entry in buffer.gallery if isinstance(entry, PersistedMedia)]
    payload.add(schema.existing_gallery_field, json.dumps(existing))
    for entry in buffer.gallery:
        if isinstance(entry, PendingMedia):
            payload.attach(schema.new_gallery_field, entry.file.filename, entry.file.content, entry.file.content_type)
    return payload
