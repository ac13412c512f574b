"""Application settings and configuration.

This module defines all configuration options for the Reeltalk application.
Settings are loaded from environment variables with sensible defaults.
"""

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Reeltalk", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(default="dev-secret-change-me", alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./reeltalk.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Metadata provider (TMDB)
    tmdb_api_key: str | None = Field(default=None, alias="TMDB_API_KEY")
    tmdb_base_url: str = Field(default="https://api.themoviedb.org/3", alias="TMDB_BASE_URL")
    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p",
        alias="TMDB_IMAGE_BASE_URL",
    )
    provider_timeout_seconds: float = Field(default=10.0, alias="PROVIDER_TIMEOUT_SECONDS")

    # Text-generation provider
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(default=None, alias="OPENAI_BASE_URL")
    insight_model: str = Field(default="gpt-4o-mini", alias="INSIGHT_MODEL")
    insight_max_tokens: int = Field(default=1000, alias="INSIGHT_MAX_TOKENS")

    # Response caching
    metadata_cache_ttl_days: int = Field(default=30, alias="METADATA_CACHE_TTL_DAYS")
    insight_cache_ttl_days: int = Field(default=90, alias="INSIGHT_CACHE_TTL_DAYS")
    memory_cache_enabled: bool = Field(default=True, alias="MEMORY_CACHE_ENABLED")

    # Insight generation quota (rolling window per user)
    insight_daily_limit: int = Field(default=5, alias="INSIGHT_DAILY_LIMIT")
    quota_window_hours: int = Field(default=24, alias="QUOTA_WINDOW_HOURS")

    # Discussion limits
    topic_prompt_min_length: int = Field(default=5, alias="TOPIC_PROMPT_MIN_LENGTH")
    topic_prompt_max_length: int = Field(default=500, alias="TOPIC_PROMPT_MAX_LENGTH")
    post_body_max_length: int = Field(default=5000, alias="POST_BODY_MAX_LENGTH")

    # Presence counting
    presence_window_seconds: int = Field(default=60, alias="PRESENCE_WINDOW_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def metadata_cache_ttl(self) -> timedelta:
        """Lifetime of a cached metadata provider response."""
        return timedelta(days=self.metadata_cache_ttl_days)

    @property
    def insight_cache_ttl(self) -> timedelta:
        """Lifetime of a cached set of generated insights."""
        return timedelta(days=self.insight_cache_ttl_days)

    @property
    def quota_window(self) -> timedelta:
        """Length of the rolling insight quota window."""
        return timedelta(hours=self.quota_window_hours)


settings = Settings()
