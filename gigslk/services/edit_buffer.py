"""Edit Buffer: the working copy of a profile while it is being edited."""

import logging
from typing import Any

from gigslk.api.middleware.error_handler import ValidationError
from gigslk.services.media import MediaRef
from gigslk.services.profile_fetcher import Profile
from gigslk.services.profile_fields import FieldKind, FieldSpec, ProfileSchema, coerce_flag, coerce_number

logger = logging.getLogger(__name__)


class EditBuffer:
    """Mutable clone of the last-fetched profile.

    Field values live in `fields`; media live in `avatar` and `gallery` as
    PersistedMedia or PendingMedia entries. Staging and removal of media
    are driven by MediaStagingArea, which writes to `avatar` and `gallery`.
    """

    def __init__(self, schema: ProfileSchema, profile: Profile) -> None:
        self.schema = schema
        self.fields: dict[str, Any] = {}
        self.avatar: MediaRef | None = None
        self.gallery: list[MediaRef] = []
        self.reset(profile)

    def reset(self, profile: Profile) -> None:
        """Discard all edits and start again from `profile`."""
        clone = profile.copy()
        self.profile = profile
        self.fields = clone.fields
        self.avatar = clone.avatar
        self.gallery = list(clone.gallery)

    def editable_spec(self, name: str) -> FieldSpec:
        try:
            spec = self.schema.field(name)
        except KeyError:
            raise ValidationError(f"Unknown {self.schema.label} profile field: {name}") from None
        if not spec.editable:
            raise ValidationError(f"Field {name} is read-only")
        return spec

    def _of_kind(self, name: str, kind: FieldKind) -> FieldSpec:
        spec = self.editable_spec(name)
        if spec.kind is not kind:
            raise ValidationError(f"Field {name} is not a {kind.value} field")
        return spec

    def get(self, name: str) -> Any:
        return self.fields[name]

    def set_field(self, name: str, value: Any) -> None:
        """Replace one field's value.

        Numbers and flags are coerced, tag lists are taken as given, and
        text is stored verbatim. Nothing else is validated here.
        """
        spec = self.editable_spec(name)
        if spec.kind is FieldKind.NUMBER:
            value = coerce_number(value, integer=spec.integer)
        elif spec.kind is FieldKind.FLAG:
            value = coerce_flag(value)
        elif spec.kind is FieldKind.TAGS:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValidationError(f"Field {name} takes a list of strings")
            value = list(value)
        elif value is None:
            value = ""
        else:
            value = str(value)
        self.fields[name] = value

    def add_tag(self, name: str, tag: str) -> bool:
        """Append a tag unless it is blank or already present (exact match).

        Returns:
            True if the collection changed.
        """
        self._of_kind(name, FieldKind.TAGS)
        tag = tag.strip()
        tags = self.fields[name]
        if not tag or tag in tags:
            return False
        tags.append(tag)
        return True

    def remove_tag(self, name: str, tag: str) -> bool:
        self._of_kind(name, FieldKind.TAGS)
        tags = self.fields[name]
        if tag not in tags:
            return False
        tags.remove(tag)
        return True

    def toggle_flag(self, name: str) -> bool:
        """Flip a flag in place and return its new value."""
        self._of_kind(name, FieldKind.FLAG)
        self.fields[name] = not self.fields[name]
        return self.fields[name]

    @property
    def is_dirty(self) -> bool:
        """Whether anything differs from the last-fetched profile."""
        return (
            self.fields != self.profile.fields
            or self.avatar != self.profile.avatar
            or self.gallery != self.profile.gallery
        )
