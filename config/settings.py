"""Application settings using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings are organized into logical groups:
    - Environment: Runtime environment configuration
    - API Keys: Gemini authentication
    - Generation: Gemini model parameters
    - Fetching: Rule description page retrieval
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    env: str = "development"
    """Runtime environment: development, staging, or production."""

    debug: bool = True
    """Enable debug mode with verbose logging."""

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    # ==========================================================================
    # API Keys (Optional, callers may pass a credential per run)
    # ==========================================================================
    gemini_api_key: SecretStr | None = None
    """Gemini API key used when no credential is passed explicitly."""

    # ==========================================================================
    # Generation Settings
    # ==========================================================================
    gemini_model: str = "gemini-2.0-flash"
    """Gemini model used to draft rule source."""

    max_output_tokens: int = 2048
    """Maximum tokens in the generated rule source."""

    llm_timeout: int = 120
    """Gemini request timeout in seconds."""

    # ==========================================================================
    # Fetching Settings
    # ==========================================================================
    fetch_timeout: float = 30.0
    """HTTP timeout in seconds for rule description pages."""

    rule_proxy_base: str | None = None
    """Local relay base URL (e.g. http://localhost:5173/proxy)."""

    rule_proxy_upstream: str | None = None
    """Origin the relay forwards to (e.g. https://www.fukushi.metro.tokyo.lg.jp)."""

    # ==========================================================================
    # Validators
    # ==========================================================================
    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"env must be one of {allowed}, got '{v}'")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got '{v}'")
        return v.upper()

    @field_validator("max_output_tokens")
    @classmethod
    def validate_max_output_tokens(cls, v: int) -> int:
        """Validate the output token limit is positive."""
        if v <= 0:
            raise ValueError(f"max_output_tokens must be positive, got {v}")
        return v

    @field_validator("rule_proxy_base", "rule_proxy_upstream")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        """Normalize relay URLs so paths join cleanly."""
        if v is None:
            return None
        return v.rstrip("/")

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def proxy_enabled(self) -> bool:
        """Check if both relay settings are present."""
        return bool(self.rule_proxy_base and self.rule_proxy_upstream)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the application.
    To reload settings, call `get_settings.cache_clear()` first.
    """
    return Settings()
