"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation.
"""

from .settings import (
    AppSettings,
    LoggingSettings,
    ProviderSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "ProviderSettings",
    "clear_settings_cache",
    "get_settings",
]
