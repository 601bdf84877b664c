"""
Configuration Management for Foco Finance

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Remote document store (Google Sheets) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # One worksheet per collection
    transactions_sheet_name: str = Field(
        default="Transactions",
        description="Worksheet holding users/{uid}/transactions documents"
    )
    ledgers_sheet_name: str = Field(
        default="Ledgers",
        description="Worksheet holding users/{uid}/ledgers documents"
    )
    public_ledgers_sheet_name: str = Field(
        default="PublicLedgers",
        description="Worksheet holding public_ledgers/{slug} shadow copies"
    )

    connect_attempts: int = Field(
        default=1,
        ge=1,
        le=5,
        description="Attempts when opening the spreadsheet (1 = no retry)"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class LocalStoreSettings(BaseSettings):
    """Device storage (local key-value file) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FOCO_LOCAL_",
        extra="ignore"
    )

    path: str = Field(
        default=str(Path.home() / ".foco_finance" / "storage.json"),
        description="JSON file backing the local key-value store"
    )
    key_prefix: str = Field(
        default="foco_finance",
        description="Prefix for every local storage key"
    )

    @property
    def auth_key(self) -> str:
        return f"{self.key_prefix}_auth"

    @property
    def theme_key(self) -> str:
        return f"{self.key_prefix}_theme"

    @property
    def transactions_key(self) -> str:
        return f"{self.key_prefix}_transactions"

    @property
    def ledgers_key(self) -> str:
        return f"{self.key_prefix}_ledgers"

    @property
    def accounts_key(self) -> str:
        return f"{self.key_prefix}_accounts"


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
    log_level: str = Field(
        default="INFO",
        description="Minimum log level for the structured logger"
    )

    # Presentation
    default_theme: Literal["light", "dark"] = Field(
        default="light",
        description="Theme used when the device has no stored preference"
    )
    public_base_url: str = Field(
        default="http://localhost:8501/",
        description="Base URL used to build public ledger share links"
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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def local_store(self) -> LocalStoreSettings:
        return LocalStoreSettings()

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
        _ = settings.google_sheets
        results["google_sheets"] = True
    except Exception as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)

    try:
        _ = settings.local_store
        results["local_store"] = True
    except Exception as e:
        results["local_store"] = False
        results["local_store_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
