"""Configuration package."""

from gofinances.config.settings import (
    AppSettings,
    GoogleAuthSettings,
    GoogleSheetsSettings,
    Settings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "GoogleAuthSettings",
    "GoogleSheetsSettings",
    "Settings",
    "get_settings",
]
