"""Process settings read from AIRESPONSE_* environment variables or .env.

The deployment tier chosen here decides which model parameter table the
pipeline uses; provider and logging settings are nested groups.

Example:
    >>> from airesponse.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.environment
    <DeploymentTier.LOCAL: 'local'>
    >>> settings.ai_config.chat.max_tokens
    2000

    # Or with environment variables:
    # AIRESPONSE_ENVIRONMENT=production
    # AIRESPONSE_AI_PROVIDER=openrouter
    # AIRESPONSE_AI_API_KEY=sk-or-...
    # AIRESPONSE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, PositiveFloat, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from airesponse.ai.config import DeploymentTier, FeatureConfig, resolve_ai_config


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AIRESPONSE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ProviderSettings(BaseSettings):
    """Model provider connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="AIRESPONSE_AI_",
        extra="ignore",
    )

    provider: Literal["mock", "openrouter"] = "mock"
    api_key: SecretStr | None = Field(default=None, description="Provider API key")
    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenAI-compatible API root",
    )
    timeout: PositiveFloat = Field(default=60.0, description="Request timeout in seconds")


class AppSettings(BaseSettings):
    """Root settings.

    Loads configuration from environment variables with AIRESPONSE_ prefix.

    Example environment variables:
        AIRESPONSE_ENVIRONMENT=staging
        AIRESPONSE_LOG_FORMAT=json
        AIRESPONSE_AI_TIMEOUT=30
    """

    model_config = SettingsConfigDict(
        env_prefix="AIRESPONSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    environment: DeploymentTier = DeploymentTier.LOCAL

    # Nested settings (loaded with AIRESPONSE_LOG_, AIRESPONSE_AI_)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    ai: ProviderSettings = Field(default_factory=ProviderSettings)

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_env(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v

    @computed_field
    @property
    def is_production(self) -> bool:
        return self.environment is DeploymentTier.PRODUCTION

    @property
    def ai_config(self) -> FeatureConfig:
        """Feature model parameters for the configured tier."""
        return resolve_ai_config(self.environment)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Get the global settings instance (cached)."""
    return AppSettings()


def clear_settings_cache() -> None:
    """Forget the cached settings; the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
