"""Unit tests for configuration module."""

import os
from unittest.mock import patch

from gigslk.core.config import Settings, get_settings


class TestSettings:
    """Tests for Settings class."""

    def test_settings_loads_from_environment(self) -> None:
        """Test that Settings loads values from environment variables."""
        env_vars = {
            "APP_NAME": "test-app",
            "APP_ENV": "testing",
            "DEBUG": "true",
            "HOST": "127.0.0.1",
            "PORT": "9000",
            "API_BASE_URL": "https://api.gigs.test",
            "MAX_UPLOAD_BYTES": "1048576",
            "UPSTREAM_AUTH_HEADER": "x-custom-token",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            settings = Settings()

            assert settings.app_name == "test-app"
            assert settings.app_env == "testing"
            assert settings.debug is True
            assert settings.host == "127.0.0.1"
            assert settings.port == 9000
            assert settings.api_base_url == "https://api.gigs.test"
            assert settings.max_upload_bytes == 1048576
            assert settings.upstream_auth_header == "x-custom-token"

    def test_settings_cors_origins_list(self) -> None:
        """Test that CORS origins are correctly parsed into a list."""
        with patch.dict(
            os.environ,
            {"CORS_ORIGINS": "http://localhost:3000, http://example.com , http://test.com"},
            clear=False,
        ):
            settings = Settings()

            assert settings.cors_origins_list == [
                "http://localhost:3000",
                "http://example.com",
                "http://test.com",
            ]

    def test_upload_limit_defaults_to_five_megabytes(self) -> None:
        """Test that the upload limit defaults to 5 MiB."""
        settings = Settings(_env_file=None)

        assert settings.max_upload_bytes == 5 * 1024 * 1024

    def test_notice_lifetimes_default(self) -> None:
        """Test the default notice lifetimes."""
        settings = Settings(_env_file=None)

        assert settings.success_notice_seconds == 3.0
        assert settings.error_notice_seconds == 5.0

    def test_trailing_slashes_are_stripped(self) -> None:
        """Test that base URLs lose their trailing slash."""
        settings = Settings(api_base_url="http://upstream.test/", media_base_url="https://cdn.test/")

        assert settings.api_base_url == "http://upstream.test"
        assert settings.media_base_url == "https://cdn.test"

    def test_storage_base_defaults_to_api_base(self) -> None:
        """Test that media resolve against the API base by default."""
        settings = Settings(api_base_url="http://upstream.test", media_base_url=None)

        assert settings.storage_base_url == "http://upstream.test"

    def test_storage_base_uses_media_base_when_set(self) -> None:
        """Test that a configured media base wins over the API base."""
        settings = Settings(api_base_url="http://upstream.test", media_base_url="https://cdn.test")

        assert settings.storage_base_url == "https://cdn.test"


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2
