"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated defaults for retry metadata and the
components that consume it.

Example:
    >>> from retrycase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.max_interval
    30.0

    # Or with environment variables:
    # RETRYCASE_RETRY_BACKOFF_VALUE=0.5
    # RETRYCASE_CIRCUIT_RESET_TIMEOUT=60
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeFloat, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Defaults for @retryable metadata and backoff selection."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_RETRY_",
        extra="ignore",
    )

    max_attempts: PositiveInt = 3
    backoff_value: NonNegativeFloat = Field(default=1.0, description="Default backoff delay in seconds")
    max_interval: PositiveFloat = Field(default=30.0, description="Exponential backoff cap when max_delay is unset")


class CircuitSettings(BaseSettings):
    """Defaults for @circuit_breaker metadata."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_CIRCUIT_",
        extra="ignore",
    )

    max_attempts: PositiveInt = 3
    open_timeout: PositiveFloat = Field(default=5.0, description="Window in seconds for counting failures")
    reset_timeout: PositiveFloat = Field(default=20.0, description="Seconds an open circuit waits before closing")


class ContextCacheSettings(BaseSettings):
    """Retry-context cache configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_CONTEXT_CACHE_",
        extra="ignore",
    )

    capacity: PositiveInt = Field(default=4096, description="Max live stateful retry contexts")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class RetrycaseSettings(BaseSettings):
    """Root settings for retrycase.

    Example environment variables:
        RETRYCASE_RETRY_MAX_ATTEMPTS=5
        RETRYCASE_CIRCUIT_OPEN_TIMEOUT=10
        RETRYCASE_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    circuit: CircuitSettings = Field(default_factory=CircuitSettings)
    context_cache: ContextCacheSettings = Field(default_factory=ContextCacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> RetrycaseSettings:
    """Get the global settings instance (cached)."""
    return RetrycaseSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
