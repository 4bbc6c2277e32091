"""Application configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="gigslk-portal", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins",
    )

    # Upstream marketplace backend
    api_base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL of the marketplace backend (profile, auth, admin and directory APIs)",
    )
    media_base_url: str | None = Field(
        default=None,
        description="Base URL the static media server serves uploads from. Defaults to api_base_url.",
    )
    upstream_auth_header: str = Field(
        default="x-auth-token",
        description="Request header carrying the upstream credential",
    )
    upstream_timeout_seconds: float = Field(default=15.0, description="Timeout for upstream requests")

    # Uploads
    max_upload_bytes: int = Field(
        default=5 * 1024 * 1024,
        description="Largest accepted size for a single staged image, in bytes",
    )
    max_request_body_size: int = Field(
        default=64 * 1024 * 1024,
        description="Largest accepted request body, in bytes",
    )
    preview_url_prefix: str = Field(
        default="/api/v1/previews",
        description="Path previews of staged files are served under",
    )

    # Notices
    success_notice_seconds: float = Field(default=3.0, description="Lifetime of success notices")
    error_notice_seconds: float = Field(default=5.0, description="Lifetime of error notices")

    # Session
    session_cookie_name: str = Field(default="gigslk_session", description="Session cookie name")
    session_cookie_max_age: int = Field(default=604800, description="Session cookie max age in seconds (7 days)")
    session_cookie_secure: bool = Field(default=True, description="Use secure cookies (HTTPS only)")
    session_ttl_seconds: int = Field(default=604800, description="Idle time after which a session is dropped")
    editor_idle_ttl_seconds: int = Field(default=3600, description="Idle time after which an open editor is closed")
    cleanup_interval_seconds: int = Field(default=300, description="Interval of the background cleanup tasks")

    @model_validator(mode="after")
    def strip_trailing_slashes(self) -> "Settings":
        """Normalize base URLs so joining them with paths never doubles a slash."""
        self.api_base_url = self.api_base_url.rstrip("/")
        if self.media_base_url:
            self.media_base_url = self.media_base_url.rstrip("/")
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def storage_base_url(self) -> str:
        """Base URL that storage-relative media paths are resolved against."""
        return self.media_base_url or self.api_base_url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Settings are cached using lru_cache for performance.
        Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
