"""Unit tests for the Edit Buffer."""

import pytest

from gigslk.api.middleware.error_handler import ValidationError
from gigslk.services.edit_buffer import EditBuffer
from gigslk.services.media import PersistedMedia
from gigslk.services.profile_fetcher import Profile
from gigslk.services.profile_fields import ARTIST_SCHEMA, ProfileKind


@pytest.fixture
def profile() -> Profile:
    fields = ARTIST_SCHEMA.defaults("jdoe")
    fields["skills"] = ["Vocals"]
    return Profile(
        kind=ProfileKind.ARTIST,
        owner_id=7,
        record_id=1,
        fields=fields,
        avatar=PersistedMedia("http://upstream.test/uploads/me.jpg"),
        gallery=[PersistedMedia("http://upstream.test/uploads/g1.jpg")],
    )


@pytest.fixture
def buffer(profile: Profile) -> EditBuffer:
    return EditBuffer(ARTIST_SCHEMA, profile)


class TestSetField:
    """Tests for EditBuffer.set_field."""

    def test_replaces_text(self, buffer: EditBuffer) -> None:
        """Test that a text field is replaced."""
        buffer.set_field("stage_name", "DJ Jay")
        assert buffer.get("stage_name") == "DJ Jay"

    def test_coerces_numbers(self, buffer: EditBuffer) -> None:
        """Test that numeric strings become numbers."""
        buffer.set_field("travel_distance", "25")
        assert buffer.get("travel_distance") == 25.0

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("false", False), ("0", False), ("", False), (0, False), ("true", True), ("1", True), (1, True), (True, True)],
    )
    def test_coerces_flags(self, buffer: EditBuffer, raw: object, expected: bool) -> None:
        """Test that flag strings and integers are read as booleans."""
        buffer.fields["direct_booking"] = not expected
        buffer.set_field("direct_booking", raw)
        assert buffer.get("direct_booking") is expected

    def test_rejects_unknown_field(self, buffer: EditBuffer) -> None:
        """Test that a field of the other variant is rejected."""
        with pytest.raises(ValidationError):
            buffer.set_field("company_organization", "Acme")

    def test_rejects_read_only_field(self, buffer: EditBuffer) -> None:
        """Test that stats cannot be edited."""
        with pytest.raises(ValidationError):
            buffer.set_field("rating", 5)

    def test_does_not_touch_profile(self, buffer: EditBuffer, profile: Profile) -> None:
        """Test that edits leave the fetched profile unchanged."""
        buffer.set_field("bio", "New bio")
        assert profile.fields["bio"] == "Tell us about your talent and experience!"


class TestTags:
    """Tests for tag collections."""

    def test_add_trims_and_appends(self, buffer: EditBuffer) -> None:
        """Test that a tag is trimmed and appended."""
        assert buffer.add_tag("skills", "  Guitar ") is True
        assert buffer.get("skills") == ["Vocals", "Guitar"]

    def test_add_duplicate_is_noop(self, buffer: EditBuffer) -> None:
        """Test that an existing tag is not added twice."""
        assert buffer.add_tag("skills", "Vocals") is False
        assert buffer.get("skills") == ["Vocals"]

    def test_add_is_case_sensitive(self, buffer: EditBuffer) -> None:
        """Test that tags differing only in case are distinct."""
        assert buffer.add_tag("skills", "vocals") is True
        assert buffer.get("skills") == ["Vocals", "vocals"]

    def test_add_blank_is_rejected(self, buffer: EditBuffer) -> None:
        """Test that a blank tag is ignored."""
        assert buffer.add_tag("skills", "   ") is False
        assert buffer.get("skills") == ["Vocals"]

    def test_remove(self, buffer: EditBuffer) -> None:
        """Test that a tag is removed."""
        assert buffer.remove_tag("skills", "Vocals") is True
        assert buffer.get("skills") == []

    def test_remove_absent_is_noop(self, buffer: EditBuffer) -> None:
        """Test that removing an absent tag changes nothing."""
        assert buffer.remove_tag("skills", "Drums") is False
        assert buffer.get("skills") == ["Vocals"]

    def test_tag_ops_need_tag_field(self, buffer: EditBuffer) -> None:
        """Test that tag operations need a tag field."""
        with pytest.raises(ValidationError):
            buffer.add_tag("bio", "x")

    def test_tag_list_is_not_shared_with_profile(self, buffer: EditBuffer, profile: Profile) -> None:
        """Test that the buffer's tag list is a copy."""
        buffer.add_tag("skills", "Guitar")
        assert profile.fields["skills"] == ["Vocals"]


class TestToggleAndReset:
    """Tests for flag toggling and reset."""

    def test_toggle_flips_in_place(self, buffer: EditBuffer) -> None:
        """Test that toggling flips the flag."""
        assert buffer.toggle_flag("availability_weekends") is True
        assert buffer.toggle_flag("availability_weekends") is False

    def test_toggle_needs_flag_field(self, buffer: EditBuffer) -> None:
        """Test that toggling needs a flag field."""
        with pytest.raises(ValidationError):
            buffer.toggle_flag("skills")

    def test_reset_restores_profile(self, buffer: EditBuffer, profile: Profile) -> None:
        """Test that reset restores the fetched values."""
        buffer.set_field("bio", "Changed")
        buffer.gallery.clear()
        buffer.avatar = None
        assert buffer.is_dirty

        buffer.reset(profile)

        assert buffer.get("bio") == profile.fields["bio"]
        assert buffer.avatar == profile.avatar
        assert buffer.gallery == profile.gallery
        assert not buffer.is_dirty
