"""Application configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings are loaded in this priority order (highest to lowest):
    1. Environment variables
    2. .env file (for local development)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = "CopyDeck API"
    debug: bool = False

    # =========================================================================
    # CORS
    # =========================================================================
    cors_origins: list[str] = ["http://localhost:5173"]

    # =========================================================================
    # API Settings
    # =========================================================================
    api_v1_prefix: str = "/api/v1"

    # =========================================================================
    # Publishing
    # =========================================================================
    # Endpoint that accepts a regenerated structured view (JSON POST).
    # The token is an already-issued bearer string; the OAuth exchange that
    # produces it runs elsewhere.
    publish_endpoint: str | None = Field(
        default=None,
        description="URL the structured view is POSTed to",
    )
    publish_token: str | None = Field(
        default=None,
        description="Bearer token sent with publish requests",
    )

    # =========================================================================
    # Local storage
    # =========================================================================
    acquisition_cache_dir: str | None = Field(
        default=None,
        description="Directory for persisted acquisition results (memory-only when unset)",
    )
    artifact_dir: str = Field(
        default="data/artifacts",
        description="Default output directory for regenerated artifacts",
    )


settings = Settings()
