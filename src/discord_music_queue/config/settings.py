"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import KeyPrefixStr, RetentionSeconds, VolumeInt

TWO_DAYS_SECONDS = 2 * 24 * 60 * 60


class RedisSettings(BaseModel):
    """Redis connection configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("url", "redis_url"),
    )
    socket_timeout_s: float = Field(
        default=3.0,
        gt=0.0,
        le=60.0,
        validation_alias=AliasChoices("socket_timeout_s", "socket_timeout"),
    )
    health_check_interval_s: int = Field(default=30, ge=0, le=3600)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate Redis URL scheme."""
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError(ErrorMessages.INVALID_REDIS_URL)
        return v


class QueueSettings(BaseModel):
    """Queue state layout and defaults."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    key_prefix: KeyPrefixStr = Field(
        default="music", validation_alias=AliasChoices("key_prefix", "prefix")
    )
    retention_seconds: RetentionSeconds = Field(
        default=TWO_DAYS_SECONDS,
        validation_alias=AliasChoices("retention_seconds", "ttl_seconds", "ttl"),
    )
    default_volume: VolumeInt = 100

    @property
    def retention_ms(self) -> int:
        return self.retention_seconds * 1000


class DiscordSettings(BaseModel):
    """Discord client configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    self_deaf: bool = True
    connect_timeout_s: float = Field(default=10.0, gt=0.0, le=60.0)


class AudioSettings(BaseModel):
    """FFmpeg options for the discord.py playback engine."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    before_options: str = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    options: str = "-vn"


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - REDIS__URL, REDIS__SOCKET_TIMEOUT_S (nested with ``__``)
    - QUEUE__KEY_PREFIX, QUEUE__RETENTION_SECONDS, QUEUE__DEFAULT_VOLUME
    - DISCORD__TOKEN, DISCORD__SELF_DEAF
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    redis: RedisSettings = Field(default_factory=RedisSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)
    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
