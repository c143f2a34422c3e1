"""Configuration settings for the riftcache data-access layer."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()

MEMORY_DATABASE = ":memory:"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_path: str = Field(
        default=str(Path.home() / ".riftcache" / "riftcache.db"),
        description="SQLite file backing the cache, or ':memory:'",
    )
    database_pool_size: int = Field(default=5, ge=1)

    @property
    def database_url(self) -> str:
        """Construct async SQLite URL from the configured path."""
        if self.database_path == MEMORY_DATABASE:
            return "sqlite+aiosqlite:///:memory:"
        return f"sqlite+aiosqlite:///{self.database_path}"

    # Application Configuration
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json", description="'json' or 'console'")

    # Riot API Configuration
    riot_api_key: Optional[str] = Field(
        default=None,
        description="Bootstrap API key; a key stored in the settings table wins",
    )
    riot_region: str = Field(default="euw1", description="Default platform region")

    request_spacing_seconds: float = Field(default=1.5, ge=0)
    backoff_base_seconds: float = Field(default=2.0, ge=0)
    max_rate_limit_retries: int = Field(default=3, ge=0)

    http_connect_timeout: float = Field(default=5.0)
    http_read_timeout: float = Field(default=25.0)
    http_write_timeout: float = Field(default=10.0)
    http_pool_timeout: float = Field(default=30.0)

    # Cache Configuration
    ranked_cache_ttl_seconds: int = Field(default=300, ge=1)
    stats_sample_size: int = Field(default=100, ge=1)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only the two renderers configured in setup_logging are accepted."""
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError(f"log_format must be 'json' or 'console', got '{v}'")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="RIFTCACHE_",
        extra="forbid",
    )


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()


# Create a global settings instance lazily
settings: Settings | None = None


def get_global_settings() -> Settings:
    """Get or create the global settings instance."""
    global settings
    if settings is None:
        settings = get_settings()
    return settings


@dataclass(frozen=True)
class ClientConfig:
    """Point-in-time copy of the runtime API configuration."""

    api_key: Optional[str]
    region: str

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


class RuntimeConfig:
    """Process-wide API key and region, guarded by an asyncio lock.

    Callers take a snapshot at the start of every external call, so an
    update becomes visible on the next call and never mid-request.
    """

    def __init__(self, api_key: Optional[str] = None, region: str = "euw1"):
        self._api_key = api_key
        self._region = region.lower()
        self._lock = asyncio.Lock()

    async def snapshot(self) -> ClientConfig:
        async with self._lock:
            return ClientConfig(api_key=self._api_key, region=self._region)

    async def set_api_key(self, api_key: Optional[str]) -> None:
        async with self._lock:
            self._api_key = api_key or None

    async def set_region(self, region: str) -> None:
        async with self._lock:
            self._region = region.lower()

    async def update(self, api_key: Optional[str], region: str) -> None:
        async with self._lock:
            self._api_key = api_key or None
            self._region = region.lower()

    @classmethod
    def from_settings(cls, app_settings: Optional[Settings] = None) -> "RuntimeConfig":
        app_settings = app_settings or get_global_settings()
        return cls(api_key=app_settings.riot_api_key, region=app_settings.riot_region)
