"""Configuration package."""

from ledger.config.settings import (
    AppSettings,
    ImportSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ImportSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
