"""Library settings loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration with sensible defaults."""

    log_level: str = Field(default="warning", alias="MEDIA_TYPE_LOG_LEVEL")
    metrics_enabled: bool = Field(default=True, alias="MEDIA_TYPE_METRICS_ENABLED")
    charset_fast_path: bool = Field(default=True, alias="MEDIA_TYPE_CHARSET_FAST_PATH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
