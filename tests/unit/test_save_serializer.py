"""Unit tests for the Save Serializer."""

import json

import pytest

from gigslk.services.edit_buffer import EditBuffer
from gigslk.services.media import MediaUrlResolver, PersistedMedia, StagedFile
from gigslk.services.media_staging import MediaStagingArea
from gigslk.services.preview_registry import PreviewRegistry
from gigslk.services.profile_fetcher import Profile
from gigslk.services.profile_fields import ARTIST_SCHEMA, HOST_SCHEMA, ProfileKind
from gigslk.services.save_serializer import serialize_profile

BASE = "http://upstream.test"


@pytest.fixture
def resolver() -> MediaUrlResolver:
    return MediaUrlResolver(BASE)


@pytest.fixture
def staging() -> MediaStagingArea:
    return MediaStagingArea(PreviewRegistry(), owner="s1")


def artist_buffer(**overrides: object) -> EditBuffer:
    fields = ARTIST_SCHEMA.defaults("jdoe")
    fields.update(
        stage_name="DJ Jay",
        skills=["Vocals", "Guitar"],
        travel_distance=25.0,
        direct_booking=True,
        rating=4.5,
        review_count=12,
    )
    profile = Profile(
        kind=ProfileKind.ARTIST,
        owner_id=7,
        fields=fields,
        avatar=PersistedMedia(f"{BASE}/uploads/me.jpg"),
        gallery=[PersistedMedia(f"{BASE}/uploads/g1.jpg"), PersistedMedia(f"{BASE}/uploads/g2.jpg")],
    )
    for name, value in overrides.items():
        setattr(profile, name, value)
    return EditBuffer(ARTIST_SCHEMA, profile)


class TestScalarFields:
    """Tests for serializing scalar fields."""

    def test_values_are_encoded(self, resolver: MediaUrlResolver) -> None:
        """Test the wire encoding of field values."""
        payload = serialize_profile(ARTIST_SCHEMA, artist_buffer(), resolver)

        assert payload.value("stage_name") == "DJ Jay"
        assert payload.value("travel_distance") == "25"
        assert payload.value("direct_booking") == "1"
        assert payload.value("availability_weekdays") == "0"
        assert json.loads(payload.value("skills")) == ["Vocals", "Guitar"]

    def test_read_only_stats_are_not_sent(self, resolver: MediaUrlResolver) -> None:
        """Test that stats are left out."""
        payload = serialize_profile(ARTIST_SCHEMA, artist_buffer(), resolver)

        assert payload.value("rating") is None
        assert payload.value("review_count") is None

    def test_each_tag_field_is_one_json_value(self, resolver: MediaUrlResolver) -> None:
        """Test that each tag list is one JSON value."""
        fields = HOST_SCHEMA.defaults("Acme")
        fields["preferred_locations_for_gigs"] = ["Colombo", "Kandy"]
        buffer = EditBuffer(HOST_SCHEMA, Profile(kind=ProfileKind.HOST, owner_id=8, fields=fields))

        payload = serialize_profile(HOST_SCHEMA, buffer, resolver)

        assert payload.values("preferred_locations_for_gigs") == ['["Colombo", "Kandy"]']
        assert payload.value("event_types_typically_hosted") == "[]"
        assert payload.value("urgent_booking_enabled") == "0"


class TestAvatar:
    """Tests for serializing the avatar."""

    def test_pending_file_omits_url_field(self, resolver: MediaUrlResolver, staging: MediaStagingArea) -> None:
        """Test that a pending avatar is sent as a file without the URL field."""
        buffer = artist_buffer()
        staging.stage_avatar(buffer, StagedFile("new.png", "image/png", b"png"))

        payload = serialize_profile(ARTIST_SCHEMA, buffer, resolver)

        assert payload.file_names("profile_picture") == ["new.png"]
        assert payload.value("profile_picture_url") is None

    def test_persisted_avatar_is_relativized(self, resolver: MediaUrlResolver) -> None:
        """Test that a kept avatar is sent as a relative path."""
        payload = serialize_profile(ARTIST_SCHEMA, artist_buffer(), resolver)

        assert payload.value("profile_picture_url") == "/uploads/me.jpg"
        assert payload.file_names("profile_picture") == []

    def test_missing_avatar_is_explicit_clear(self, resolver: MediaUrlResolver) -> None:
        """Test that no avatar is sent as an empty URL."""
        payload = serialize_profile(ARTIST_SCHEMA, artist_buffer(avatar=None), resolver)

        assert payload.value("profile_picture_url") == ""

    def test_placeholder_avatar_is_explicit_clear(self, resolver: MediaUrlResolver) -> None:
        """Test that the placeholder avatar is sent as an empty URL."""
        placeholder = PersistedMedia(ARTIST_SCHEMA.placeholder_avatar)
        payload = serialize_profile(ARTIST_SCHEMA, artist_buffer(avatar=placeholder), resolver)

        assert payload.value("profile_picture_url") == ""


class TestGallery:
    """Tests for serializing the gallery."""

    def test_only_persisted_urls_are_listed(self, resolver: MediaUrlResolver, staging: MediaStagingArea) -> None:
        """Test that only persisted images are in the JSON list."""
        buffer = artist_buffer()
        staging.stage_gallery(buffer, [StagedFile("a.jpg", "image/jpeg", b"a"), StagedFile("b.jpg", "image/jpeg", b"b")])

        payload = serialize_profile(ARTIST_SCHEMA, buffer, resolver)

        assert json.loads(payload.value("gallery_images")) == ["/uploads/g1.jpg", "/uploads/g2.jpg"]
        assert payload.file_names("gallery_images") == ["a.jpg", "b.jpg"]

    def test_removed_persisted_url_is_not_sent(self, resolver: MediaUrlResolver, staging: MediaStagingArea) -> None:
        """Test that a removed persisted image is not listed."""
        buffer = artist_buffer()
        staging.remove(buffer, PersistedMedia(f"{BASE}/uploads/g1.jpg"))

        payload = serialize_profile(ARTIST_SCHEMA, buffer, resolver)

        assert json.loads(payload.value("gallery_images")) == ["/uploads/g2.jpg"]

    def test_removed_pending_file_is_not_sent(self, resolver: MediaUrlResolver, staging: MediaStagingArea) -> None:
        """Test that a removed pending file is not attached."""
        buffer = artist_buffer()
        staged, _ = staging.stage_gallery(
            buffer, [StagedFile("a.jpg", "image/jpeg", b"a"), StagedFile("b.jpg", "image/jpeg", b"b")]
        )
        staging.remove(buffer, staged[0])

        payload = serialize_profile(ARTIST_SCHEMA, buffer, resolver)

        assert payload.file_names("gallery_images") == ["b.jpg"]
        assert json.loads(payload.value("gallery_images")) == ["/uploads/g1.jpg", "/uploads/g2.jpg"]

    def test_parts_keep_order_with_text_before_files(
        self, resolver: MediaUrlResolver, staging: MediaStagingArea
    ) -> None:
        """Text values become filename-less parts ahead of the file parts."""
        buffer = artist_buffer()
        staging.stage_gallery(buffer, [StagedFile("a.jpg", "image/jpeg", b"a")])
        payload = serialize_profile(ARTIST_SCHEMA, buffer, resolver)

        parts = payload.parts()

        assert parts[: len(payload.data)] == [(name, (None, value)) for name, value in payload.data]
        assert parts[-1] == ("gallery_images", ("a.jpg", b"a", "image/jpeg"))
