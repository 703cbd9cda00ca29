"""Application settings using Pydantic Settings for environment-based configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the VC intelligence hub.

    All settings can be overridden via environment variables.
    Prefix is not used so credentials keep their conventional names
    (e.g., NEWSAPI_KEY, GITHUB_TOKEN).

    Source enablement is resolved once here and handed to each source
    at construction; sources never read the environment themselves.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Cache
    cache_ttl_hours: float = Field(default=4.0, gt=0.0)  # CACHE_TTL_HOURS

    # Fan-out
    source_timeout_seconds: float = Field(default=15.0, gt=0.0, le=300.0)

    # HTTP retry configuration
    http_timeout_seconds: float = Field(default=5.0, gt=0.0)
    max_http_retries: int = Field(default=2, ge=0, le=10)
    max_backoff_seconds: float = Field(default=10.0, ge=1.0, le=300.0)

    # Hacker News (public API, opt-in)
    hacker_news_enabled: bool = False
    hacker_news_story_limit: int = Field(default=20, ge=1, le=100)

    # NewsAPI
    newsapi_key: str | None = None

    # GitHub
    github_token: str | None = None
    github_enabled: bool = True

    # Synthetic sources for development without credentials
    mock_sources: bool = False

    # Observability
    metrics_port: int = 8000

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def cache_ttl_seconds(self) -> float:
        """Get cache TTL in seconds."""
        return self.cache_ttl_hours * 3600

    @property
    def newsapi_configured(self) -> bool:
        """Check if NewsAPI credentials are present."""
        return bool(self.newsapi_key)

    @property
    def github_configured(self) -> bool:
        """Check if the GitHub source may run (token required)."""
        return self.github_enabled and bool(self.github_token)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()
