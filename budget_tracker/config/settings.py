"""
Configuration Management for Budget Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class InferenceSettings(BaseSettings):
    """Remote inference (agent chat) endpoint configuration."""

    model_config = SettingsConfigDict(
        env_prefix="INFERENCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: str = Field(
        default="https://agent-prod.studio.lyzr.ai/v3/inference/chat/",
        description="Chat inference endpoint URL"
    )
    api_key: str = Field(
        ...,
        description="API key sent in the x-api-key header"
    )
    insights_agent_id: str = Field(
        default="68e16e5d3637bc8ddc9fff03",
        description="Agent that produces spending insights"
    )
    category_agent_id: str = Field(
        default="68e16e75f21978807e7e9e8d",
        description="Agent that suggests a transaction category"
    )

    # Transport behaviour
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for a single request"
    )
    max_attempts: int = Field(
        default=2,
        ge=1,
        le=5,
        description="Attempts per request on transport errors"
    )
    retry_wait_seconds: float = Field(
        default=1.0,
        ge=0,
        le=30,
        description="Base wait between attempts (exponential)"
    )

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Only allow http(s) endpoints."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Inference base_url must be an http(s) URL, got: {v}")
        return v


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    path: str = Field(
        default="budget_tracker_data.json",
        description="Path to the JSON file backing the key-value store"
    )

    # Keys within the store
    transactions_key: str = Field(
        default="budgetTrackerTransactions",
        description="Key holding the serialized transaction list"
    )
    dark_mode_key: str = Field(
        default="budgetTrackerDarkMode",
        description="Key holding the serialized dark-mode flag"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON (otherwise console format)"
    )

    # Defaults for a fresh session
    default_reporting_window: str = Field(
        default="weekly",
        pattern="^(weekly|monthly)$",
        description="Reporting window used when the app starts"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol shown in front of amounts"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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

    # Note: sub-settings are loaded lazily to allow partial configuration
    # (the app runs without an inference key, insights just fall back).

    @property
    def inference(self) -> InferenceSettings:
        return InferenceSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry for each failure.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("inference", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
