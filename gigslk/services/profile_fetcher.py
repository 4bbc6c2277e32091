"""Profile Fetcher: load the current account's profile, fully defaulted."""

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from gigslk.api.middleware.error_handler import AuthenticationError
from gigslk.models import ProfileRecord
from gigslk.services.gigs_api_client import GigsApiClient
from gigslk.services.media import MediaUrlResolver, PersistedMedia
from gigslk.services.profile_fields import ProfileKind, ProfileSchema, coerce_tags
from gigslk.services.session_service import AuthSession

logger = logging.getLogger(__name__)


@dataclass
class Profile:
    """A profile as the editor sees it: no nulls, media in display form.

    Attributes:
        kind: Artist or host.
        owner_id: Account that owns the profile.
        record_id: Upstream row id, None for a profile not created yet.
        fields: Every schema field, coerced and defaulted.
        avatar: The stored avatar, None if unset or a placeholder.
        gallery: Stored gallery images in their stored order.
        exists: False when synthesized for an account with no profile.
    """

    kind: ProfileKind
    owner_id: int | str
    record_id: int | str | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    avatar: PersistedMedia | None = None
    gallery: list[PersistedMedia] = field(default_factory=list)
    exists: bool = True

    def copy(self) -> "Profile":
        """Deep enough copy for an edit buffer: containers are not shared."""
        return replace(
            self,
            fields={
                name: list(value) if isinstance(value, list) else value
                for name, value in self.fields.items()
            },
            gallery=list(self.gallery),
        )


def build_profile(
    schema: ProfileSchema,
    record: ProfileRecord | None,
    session: AuthSession,
    resolver: MediaUrlResolver,
) -> Profile:
    """Turn a raw upstream record (or its absence) into a Profile."""
    username = session.username
    if record is None:
        return Profile(
            kind=schema.kind,
            owner_id=session.user.id,
            fields=schema.defaults(username),
            exists=False,
        )

    fields = {spec.name: spec.coerce(record.get(spec.name), username) for spec in schema.fields}
    avatar = resolver.persisted(record.get(schema.avatar_url_field))
    gallery = [
        media
        for media in (resolver.persisted(path) for path in coerce_tags(record.get(schema.gallery_url_field)))
        if media is not None
    ]
    return Profile(
        kind=schema.kind,
        owner_id=record.get("user_id") or session.user.id,
        record_id=record.get("id"),
        fields=fields,
        avatar=avatar,
        gallery=gallery,
    )


class ProfileFetcher:
    """Retrieves the profile owned by the signed-in account."""

    def __init__(self, schema: ProfileSchema, api: GigsApiClient, resolver: MediaUrlResolver) -> None:
        self.schema = schema
        self.api = api
        self.resolver = resolver

    @property
    def fallback_message(self) -> str:
        return f"Failed to fetch {self.schema.label} profile."

    async def fetch(self, session: AuthSession | None) -> Profile:
        """Fetch and default the current account's profile.

        Raises:
            AuthenticationError: No session or no credential; nothing is sent.
            FetchError: The backend answered with an error or was unreachable.
        """
        if session is None or not session.is_authenticated:
            raise AuthenticationError("You must be signed in to view your profile.")

        record = await self.api.get_profile(
            self.schema.endpoint, session.token, fallback=self.fallback_message
        )
        if record is None:
            logger.info("No %s profile yet for account %s", self.schema.label, session.user.id)
        return build_profile(self.schema, record, session, self.resolver)
