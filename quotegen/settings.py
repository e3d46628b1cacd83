"""
Application settings using Pydantic Settings.

Loads configuration from environment variables and .env file. This is the
only place the environment is read; everything below it receives an
explicit OpenRouterConfig.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .openrouter.config import (
    DEFAULT_BASE_URL,
    OpenRouterConfig,
    RetryConfig,
    TimeoutConfig,
)


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # OpenRouter
    # ==========================================================================

    openrouter_api_key: str = Field(
        default="",
        description="OpenRouter API key (required)"
    )

    openrouter_model: str = Field(
        default="",
        description="OpenRouter model identifier, e.g. openai/gpt-4o-mini (required)"
    )

    openrouter_base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="OpenRouter API base URL"
    )

    openrouter_timeout: float = Field(
        default=60.0,
        description="Read timeout per request in seconds"
    )

    openrouter_max_attempts: int = Field(
        default=3,
        description="Maximum attempts per quote fetch"
    )

    # ==========================================================================
    # Logging
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level"
    )

    log_format: str = Field(
        default="text",
        description="Log format: text or json"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = {"text", "json"}
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Invalid log format: {v}. Must be one of {valid_formats}")
        return v_lower

    # ==========================================================================
    # Server
    # ==========================================================================

    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=8080,
        description="Port to listen on"
    )

    # ==========================================================================
    # Computed Properties
    # ==========================================================================

    @property
    def is_configured(self) -> bool:
        """Check whether the OpenRouter credentials are present."""
        return bool(self.openrouter_api_key and self.openrouter_model)

    def to_openrouter_config(self) -> OpenRouterConfig:
        """
        Build the client configuration.

        Raises ConfigurationError when the API key or model is missing.
        """
        return OpenRouterConfig(
            api_key=self.openrouter_api_key,
            model=self.openrouter_model,
            base_url=self.openrouter_base_url or DEFAULT_BASE_URL,
            retry=RetryConfig(max_attempts=self.openrouter_max_attempts),
            timeout=TimeoutConfig(read_timeout=self.openrouter_timeout),
        )

    def to_safe_dict(self) -> dict:
        """Return settings as dict with secrets redacted."""
        data = {
            "openrouter_model": self.openrouter_model or "(not set)",
            "openrouter_base_url": self.openrouter_base_url,
            "openrouter_timeout": self.openrouter_timeout,
            "openrouter_max_attempts": self.openrouter_max_attempts,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "host": self.host,
            "port": self.port,
        }

        # Redact secrets
        if self.openrouter_api_key:
            key = self.openrouter_api_key
            data["openrouter_api_key"] = f"{key[:8]}...{key[-4:]}" if len(key) > 12 else "***"
        else:
            data["openrouter_api_key"] = "(not set)"

        return data


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience function to reload settings (clears cache)
def reload_settings() -> Settings:
    """Reload settings from environment."""
    get_settings.cache_clear()
    return get_settings()
