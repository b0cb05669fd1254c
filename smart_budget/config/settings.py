"""
Configuration Management for Smart Budget

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every setting has a sensible default so the app runs with no
configuration at all; a ``.env`` file only overrides.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from smart_budget.models.preferences import get_currency


class StorageSettings(BaseSettings):
    """Local record store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["json", "sqlite", "memory"] = Field(
        default="json",
        description="Which local store to use"
    )
    path: str = Field(
        default="smart_budget_data.json",
        description="File used by the json and sqlite backends"
    )
    audit_log_path: str = Field(
        default="",
        description="JSON-lines audit file; empty keeps audit events in the local log only"
    )
    attachments_dir: str = Field(
        default="smart_budget_receipts",
        description="Directory holding receipt images attached to expenses"
    )

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Warn if the parent directory doesn't exist (but don't fail - might be created later)."""
        parent = Path(v).expanduser().parent
        if not parent.exists():
            import warnings
            warnings.warn(
                f"Storage directory not found at {parent}. "
                "Make sure it exists before running the application."
            )
        return v


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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Ledger
    history_limit: int = Field(
        default=50,
        ge=1,
        le=500,
        description="How many balance events to keep"
    )
    default_currency_code: str = Field(
        default="SAR",
        description="Currency used until the user picks one"
    )

    # Validation thresholds
    max_record_amount: float = Field(
        default=10000000.0,
        gt=0,
        description="Amounts above this get a sanity warning"
    )
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a record date can be"
    )

    @field_validator('default_currency_code')
    @classmethod
    def validate_currency_code(cls, v: str) -> str:
        """Only supported currencies can be the default."""
        try:
            return get_currency(v).code
        except KeyError as e:
            raise ValueError(str(e))


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

    # Note: These are loaded lazily to allow partial configuration

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

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
