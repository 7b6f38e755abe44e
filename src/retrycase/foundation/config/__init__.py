"""Configuration management using pydantic-settings."""

from .log import configure_logging
from .settings import (
    CircuitSettings,
    ContextCacheSettings,
    LoggingSettings,
    RetrycaseSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "CircuitSettings",
    "ContextCacheSettings",
    "LoggingSettings",
    "RetrySettings",
    "RetrycaseSettings",
    "clear_settings_cache",
    "configure_logging",
    "get_settings",
]
