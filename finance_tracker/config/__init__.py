"""Configuration package."""

from finance_tracker.config.settings import (
    AppSettings,
    BackupSettings,
    BudgetSettings,
    PreferenceSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "BackupSettings",
    "BudgetSettings",
    "PreferenceSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
