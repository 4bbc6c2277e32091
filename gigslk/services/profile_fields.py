"""Field-mapping configuration for the artist and host profile variants.

A ProfileSchema lists which fields a variant has, how each is coerced when
read from the backend, its default, and how it is encoded on save. The
fetcher, edit buffer and save serializer are all driven by it, so the two
variants share one implementation.
"""

import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ProfileKind(str, Enum):
    """Profile variants, also used as the URL path segment."""

    ARTIST = "artist"
    HOST = "host"


class FieldKind(str, Enum):
    """How a profile field is coerced, edited and serialized."""

    TEXT = "text"
    NUMBER = "number"
    FLAG = "flag"
    TAGS = "tags"
    STAT = "stat"  # read-only aggregate, never serialized


class FlagEncoding(str, Enum):
    """Wire convention for boolean fields in a profile submission."""

    ONE_ZERO = "one_zero"
    TRUE_FALSE = "true_false"

    def encode(self, value: bool) -> str:
        if self is FlagEncoding.ONE_ZERO:
            return "1" if value else "0"
        return "true" if value else "false"


@dataclass(frozen=True)
class FieldSpec:
    """One profile field.

    Attributes:
        name: Field name on the wire, both in records and submissions.
        kind: Coercion and serialization rule.
        default: Value used when the record has null or no value.
        username_fallback: Use the account username before `default`.
        integer: For NUMBER/STAT fields, coerce to int instead of float.
    """

    name: str
    kind: FieldKind
    default: Any = ""
    username_fallback: bool = False
    integer: bool = False

    @property
    def editable(self) -> bool:
        return self.kind is not FieldKind.STAT

    def default_value(self, username: str | None = None) -> Any:
        if self.username_fallback and username:
            return username
        if self.kind is FieldKind.TAGS:
            return []
        return self.default

    def coerce(self, raw: Any, username: str | None = None) -> Any:
        """Turn a raw record value into this field's in-memory value."""
        if self.kind is FieldKind.TEXT:
            return raw if isinstance(raw, str) and raw else self.default_value(username)
        if self.kind in (FieldKind.NUMBER, FieldKind.STAT):
            if raw is None:
                return self.default_value(username)
            return coerce_number(raw, integer=self.integer)
        if self.kind is FieldKind.FLAG:
            if raw is None:
                return bool(self.default)
            return coerce_flag(raw)
        if self.kind is FieldKind.TAGS:
            return coerce_tags(raw)
        raise ValueError(f"Unknown field kind: {self.kind}")


@dataclass(frozen=True)
class ProfileSchema:
    """Complete description of one profile variant and its endpoint.

    Attributes:
        kind: Which variant this is.
        label: Human-readable name used in messages.
        endpoint: Upstream path for GET and PUT of the current account's profile.
        required_role: Account role allowed to edit this profile.
        fields: Every scalar, flag, tag and stat field.
        placeholder_avatar: Display URL shown when there is no avatar.
        flag_encoding: Boolean convention the endpoint expects.
        avatar_url_field: Submission field for the existing avatar path.
        avatar_upload_field: Submission field for a new avatar file.
        gallery_url_field: Record field holding the stored gallery paths.
        existing_gallery_field: Submission field for the JSON list of kept gallery paths.
        new_gallery_field: Submission field repeated once per new gallery file.
    """

    kind: ProfileKind
    label: str
    endpoint: str
    required_role: str
    fields: tuple[FieldSpec, ...]
    placeholder_avatar: str
    flag_encoding: FlagEncoding = FlagEncoding.ONE_ZERO
    avatar_url_field: str = "profile_picture_url"
    avatar_upload_field: str = "profile_picture"
    gallery_url_field: str = "gallery_images"
    existing_gallery_field: str = "gallery_images"
    new_gallery_field: str = "gallery_images"

    def field(self, name: str) -> FieldSpec:
        """Look up a field by name.

        Raises:
            KeyError: If the variant has no such field.
        """
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)

    @property
    def editable_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.editable)

    def defaults(self, username: str | None = None) -> dict[str, Any]:
        """All fields at their default values."""
        return {spec.name: spec.default_value(username) for spec in self.fields}


def coerce_number(raw: Any, integer: bool = False) -> int | float:
    """Parse a number that may arrive as a string; failures become 0."""
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    try:
        value = float(raw if isinstance(raw, (int, float)) else str(raw).strip())
    except ValueError:
        logger.debug("Could not parse %r as a number, using 0", raw)
        return 0
    if not math.isfinite(value):
        return 0
    return int(value) if integer else value


def coerce_flag(raw: Any) -> bool:
    """Read a boolean stored as bool, 0/1, or a string."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return raw == 1
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return False


def coerce_tags(raw: Any) -> list[str]:
    """Read a string collection stored as a list or a JSON-encoded list."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return []
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, str)]


def format_number(value: int | float) -> str:
    """Render a number the way the backend parses it back ("1500", "1500.5")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


ARTIST_SCHEMA = ProfileSchema(
    kind=ProfileKind.ARTIST,
    label="performer",
    endpoint="/api/performers/profile",
    required_role="performer",
    placeholder_avatar="https://placehold.co/150x150/553c9a/ffffff?text=Profile",
    fields=(
        FieldSpec("full_name", FieldKind.TEXT, "", username_fallback=True),
        FieldSpec("stage_name", FieldKind.TEXT, ""),
        FieldSpec("location", FieldKind.TEXT, "Not Set"),
        FieldSpec("performance_type", FieldKind.TEXT, "Not Set"),
        FieldSpec("bio", FieldKind.TEXT, "Tell us about your talent and experience!"),
        FieldSpec("price", FieldKind.TEXT, "Rs. 0 - Rs. 0"),
        FieldSpec("contact_number", FieldKind.TEXT, "Not Set"),
        FieldSpec("skills", FieldKind.TAGS),
        FieldSpec("direct_booking", FieldKind.FLAG, False),
        FieldSpec("travel_distance", FieldKind.NUMBER, 0),
        FieldSpec("availability_weekdays", FieldKind.FLAG, False),
        FieldSpec("availability_weekends", FieldKind.FLAG, False),
        FieldSpec("availability_morning", FieldKind.FLAG, False),
        FieldSpec("availability_evening", FieldKind.FLAG, False),
        FieldSpec("rating", FieldKind.STAT, 0),
        FieldSpec("review_count", FieldKind.STAT, 0, integer=True),
    ),
)

HOST_SCHEMA = ProfileSchema(
    kind=ProfileKind.HOST,
    label="host",
    endpoint="/api/hosts/profile",
    required_role="host",
    placeholder_avatar="https://placehold.co/150x150/553c9a/ffffff?text=Host",
    fields=(
        FieldSpec("company_organization", FieldKind.TEXT, "", username_fallback=True),
        FieldSpec("contact_person", FieldKind.TEXT, ""),
        FieldSpec("contact_number", FieldKind.TEXT, ""),
        FieldSpec("location", FieldKind.TEXT, "Not Set"),
        FieldSpec("bio", FieldKind.TEXT, ""),
        FieldSpec("event_types_typically_hosted", FieldKind.TAGS),
        FieldSpec("preferred_performer_types", FieldKind.TAGS),
        FieldSpec("preferred_locations_for_gigs", FieldKind.TAGS),
        FieldSpec("default_budget_range_min", FieldKind.NUMBER, 0),
        FieldSpec("default_budget_range_max", FieldKind.NUMBER, 0),
        FieldSpec("urgent_booking_enabled", FieldKind.FLAG, False),
        FieldSpec("email_notifications_enabled", FieldKind.FLAG, False),
        FieldSpec("sms_notifications_enabled", FieldKind.FLAG, False),
        FieldSpec("events_hosted", FieldKind.STAT, 0, integer=True),
        FieldSpec("average_rating", FieldKind.STAT, 0),
        FieldSpec("total_reviews", FieldKind.STAT, 0, integer=True),
    ),
)

_SCHEMAS: dict[ProfileKind, ProfileSchema] = {
    ProfileKind.ARTIST: ARTIST_SCHEMA,
    ProfileKind.HOST: HOST_SCHEMA,
}


def get_profile_schema(kind: ProfileKind) -> ProfileSchema:
    """Get the field-mapping configuration for a profile variant."""
    return _SCHEMAS[kind]
