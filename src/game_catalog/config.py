"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation,
type coercion, and sensible defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ListingAPIConfig(BaseSettings):
    """Remote game listing API configuration."""

    model_config = SettingsConfigDict(env_prefix="LISTING_")

    base_url: str = Field(
        default="https://debuggers-games-api.duckdns.org/api/games",
        description="Paginated listing endpoint (accepts ?page=&limit=)",
    )
    fetch_limit: int = Field(
        default=100,
        ge=1,
        le=500,
        description="Number of records requested per remote page",
    )
    timeout_seconds: int = Field(
        default=30,
        ge=5,
        le=120,
        description="HTTP request timeout in seconds",
    )
    user_agent: str = Field(
        default="GameCatalogClient/1.0",
        description="User-Agent header sent with every request",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the endpoint so query strings attach cleanly."""
        return v.rstrip("/")


class CatalogConfig(BaseSettings):
    """Catalog engine behaviour."""

    model_config = SettingsConfigDict(env_prefix="CATALOG_")

    page_size: int = Field(
        default=32,
        ge=1,
        le=200,
        description="Records per local page of the filtered view",
    )
    max_accumulated_records: int = Field(
        default=500,
        ge=1,
        description="Infinite scroll stops extending past this many records",
    )
    search_debounce_seconds: float = Field(
        default=0.3,
        ge=0.0,
        le=5.0,
        description="Quiet period before a search recomputes the view",
    )
    allowed_genres: list[str] = Field(
        default=["Action", "RPG", "Adventure", "Simulation"],
        description="Genre values offered by the genre filter",
    )
    allowed_platforms: list[str] = Field(
        default=["PC", "PlayStation", "Xbox", "Switch"],
        description="Platform families offered by the platform filter",
    )


class StorageConfig(BaseSettings):
    """Local persistence configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    profile_dir: Path = Field(
        default=Path("data/profile"),
        description="Directory holding the persisted favorites and ratings",
    )


class RetryConfig(BaseSettings):
    """Retry behavior for transient listing API failures."""

    model_config = SettingsConfigDict(env_prefix="RETRY_")

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum number of attempts per page request",
    )
    base_delay_seconds: float = Field(
        default=0.5,
        ge=0.1,
        le=30.0,
        description="Base delay between retries (exponential backoff)",
    )
    max_delay_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=300.0,
        description="Maximum delay between retries",
    )
    exponential_base: float = Field(
        default=2.0,
        ge=1.5,
        le=4.0,
        description="Base for exponential backoff calculation",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )
    format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    include_timestamp: bool = Field(
        default=True,
        description="Include timestamp in log entries",
    )


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections and provides
    a single entry point for configuration access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )

    # Sub-configurations
    listing: ListingAPIConfig = Field(default_factory=ListingAPIConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
