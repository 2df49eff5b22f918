"""
Configuration Management for GoFinances

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets key-value storage configuration."""

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
    store_sheet_name: str = Field(
        default="KeyValueStore",
        description="Name of the sheet holding key/value rows"
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


class GoogleAuthSettings(BaseSettings):
    """Google sign-in configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_AUTH_",
        extra="ignore"
    )

    ios_client_id: Optional[str] = Field(
        default=None,
        description="OAuth client ID issued for the iOS app"
    )
    android_client_id: Optional[str] = Field(
        default=None,
        description="OAuth client ID issued for the Android app"
    )
    web_client_id: Optional[str] = Field(
        default=None,
        description="OAuth client ID issued for web clients"
    )

    @property
    def client_ids(self) -> list[str]:
        """All configured client IDs (an ID token may be issued for any of them)."""
        return [
            client_id
            for client_id in (self.ios_client_id, self.android_client_id, self.web_client_id)
            if client_id
        ]


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="GOFINANCES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Storage
    storage_namespace: str = Field(
        default="@gofinances",
        min_length=1,
        description="Prefix for every key written to the store"
    )
    storage_backend: str = Field(
        default="file",
        pattern="^(memory|file|google_sheets)$",
        description="Which key-value backend to use"
    )
    storage_file_path: str = Field(
        default="gofinances_store.json",
        description="Path of the JSON file used by the file backend"
    )

    # Presentation (labels are pt-BR)
    currency: str = Field(
        default="BRL",
        description="Currency code for all amounts"
    )
    timezone: str = Field(
        default="UTC",
        description="IANA timezone in which transaction dates are rendered"
    )
    avatar_base_url: str = Field(
        default="https://ui-avatars.com/api/",
        description="Avatar generation endpoint for users without a photo"
    )

    @property
    def session_key(self) -> str:
        return f"{self.storage_namespace}:user"

    def transactions_key(self, user_id: str) -> str:
        """Storage key of the transaction partition owned by ``user_id``."""
        return f"{self.storage_namespace}:transactions_user:{user_id}"


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

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def google_auth(self) -> GoogleAuthSettings:
        return GoogleAuthSettings()

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
