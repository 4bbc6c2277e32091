"""Unit tests for the open-editor registry."""

from unittest.mock import AsyncMock

import pytest

from gigslk.api.middleware.error_handler import FetchError
from gigslk.core.config import Settings
from gigslk.schemas.auth import SessionUser
from gigslk.services.editor_registry import EditorRegistry
from gigslk.services.gigs_api_client import GigsApiClient
from gigslk.services.media import StagedFile
from gigslk.services.preview_registry import PreviewRegistry
from gigslk.services.profile_editor import ProfileEditor
from gigslk.services.profile_fields import ARTIST_SCHEMA, HOST_SCHEMA, ProfileKind
from gigslk.services.session_service import AuthSession


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def api() -> AsyncMock:
    api = AsyncMock(spec=GigsApiClient)
    api.get_profile.return_value = None
    return api


@pytest.fixture
def previews() -> PreviewRegistry:
    return PreviewRegistry()


@pytest.fixture
def registry() -> EditorRegistry:
    return EditorRegistry(idle_ttl_seconds=600)


def make_editor(api, previews, clock, session_id="s1", schema=ARTIST_SCHEMA) -> ProfileEditor:
    user = SessionUser(id=7, email="jay@example.com", role=schema.required_role, username="jdoe")
    session = AuthSession(session_id=session_id, token="tok", user=user)
    settings = Settings(api_base_url="http://upstream.test")
    return ProfileEditor(schema, session, api, previews, settings, clock=clock)


class TestEditorRegistry:
    """Tests for EditorRegistry."""

    @pytest.mark.asyncio
    async def test_open_loads_and_registers(self, registry, api, previews, clock) -> None:
        """Test that opening loads the profile and registers the editor."""
        editor = await registry.open(make_editor(api, previews, clock))

        assert editor.is_loaded
        assert registry.get("s1", ProfileKind.ARTIST) is editor
        assert registry.get("s1", ProfileKind.HOST) is None

    @pytest.mark.asyncio
    async def test_reopen_closes_previous(self, registry, api, previews, clock) -> None:
        """Test that reopening closes the previous editor of that kind."""
        first = await registry.open(make_editor(api, previews, clock))
        first.stage_avatar(StagedFile("me.png", "image/png", b"png"))

        second = await registry.open(make_editor(api, previews, clock))

        assert first.closed
        assert len(previews) == 0
        assert registry.get("s1", ProfileKind.ARTIST) is second
        assert len(registry) == 1

    @pytest.mark.asyncio
    async def test_failed_open_registers_nothing(self, registry, api, previews, clock) -> None:
        """Test that a failed load leaves no editor behind."""
        api.get_profile.side_effect = FetchError("Failed to fetch performer profile.")

        with pytest.raises(FetchError):
            await registry.open(make_editor(api, previews, clock))

        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_close_session_closes_all_kinds(self, registry, api, previews, clock) -> None:
        """Test that ending a session closes every editor it has."""
        await registry.open(make_editor(api, previews, clock))
        await registry.open(make_editor(api, previews, clock, schema=HOST_SCHEMA))
        await registry.open(make_editor(api, previews, clock, session_id="s2"))

        assert registry.close_session("s1") == 2
        assert len(registry) == 1
        assert not registry.close("s1", ProfileKind.ARTIST)
        assert registry.close("s2", ProfileKind.ARTIST)

    @pytest.mark.asyncio
    async def test_cleanup_closes_idle_editors(self, registry, api, previews, clock) -> None:
        """Test that idle editors are closed by cleanup."""
        idle = await registry.open(make_editor(api, previews, clock))
        busy = await registry.open(make_editor(api, previews, clock, session_id="s2"))
        busy.is_saving = True

        clock.now += 601

        assert registry.cleanup() == 1
        assert idle.closed
        assert not busy.closed

    @pytest.mark.asyncio
    async def test_get_keeps_editor_alive(self, registry, api, previews, clock) -> None:
        """Test that looking up an editor refreshes its idle timer."""
        await registry.open(make_editor(api, previews, clock))

        clock.now += 500
        registry.get("s1", ProfileKind.ARTIST)
        clock.now += 500

        assert registry.cleanup() == 0
