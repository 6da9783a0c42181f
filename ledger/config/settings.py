"""
Configuration Management for the Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The functional core takes every value as an argument; only the host
layer (LedgerSession, AuditLogger) reads settings.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level (DEBUG, INFO, WARNING, ERROR)"
    )
    json_output: bool = Field(
        default=True,
        description="Render log lines as JSON instead of console text"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept standard level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Summaries
    recent_limit: int = Field(
        default=5,
        ge=1,
        le=500,
        description="How many assignments the recent list shows by default"
    )

    # Input limits
    max_name_length: int = Field(
        default=200,
        ge=1,
        description="Longest display name a host accepts"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool | str]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for sections that failed.
    """
    results: dict[str, bool | str] = {}

    settings = get_settings()

    for section in ("app", "logging"):
        try:
            getattr(settings, section)
            results[section] = True
        except ValueError as e:
            results[section] = False
            results[f"{section}_error"] = str(e)

    return results
