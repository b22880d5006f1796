"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Where the data lives, which defaults a fresh install starts with and
where the budget thresholds sit are all visible in one place and
validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_TRACKER_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the namespace files"
    )
    backup_dir: Optional[Path] = Field(
        default=None,
        description="Directory for backup snapshots (defaults to <data_dir>/backups)"
    )

    @property
    def resolved_backup_dir(self) -> Path:
        """Backup directory, falling back to a folder inside data_dir."""
        return self.backup_dir if self.backup_dir is not None else self.data_dir / "backups"


class PreferenceSettings(BaseSettings):
    """Defaults written to the preference record on first launch."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_TRACKER_PREFS_",
        extra="ignore"
    )

    default_currency_symbol: str = Field(
        default="$",
        min_length=1,
        max_length=5,
        description="Currency symbol shown next to amounts"
    )
    default_monthly_budget: float = Field(
        default=0.0,
        ge=0.0,
        description="Monthly budget (0 means no budget set)"
    )
    default_notifications_enabled: bool = Field(
        default=True,
        description="Whether budget alerts are enabled"
    )


class BudgetSettings(BaseSettings):
    """Budget tier thresholds, in percent of the monthly budget."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_TRACKER_BUDGET_",
        extra="ignore"
    )

    approaching_threshold: float = Field(
        default=80.0,
        gt=0.0,
        description="Percentage at which the budget counts as approaching"
    )
    exceeded_threshold: float = Field(
        default=100.0,
        gt=0.0,
        description="Percentage at which the budget counts as exceeded"
    )

    @model_validator(mode='after')
    def validate_threshold_order(self) -> 'BudgetSettings':
        """Approaching must come before exceeded."""
        if self.approaching_threshold >= self.exceeded_threshold:
            raise ValueError("Approaching threshold must be below exceeded threshold")
        return self


class BackupSettings(BaseSettings):
    """Backup snapshot naming."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_TRACKER_BACKUP_",
        extra="ignore"
    )

    file_prefix: str = Field(
        default="finance_backup_",
        min_length=1,
        description="Fixed prefix of every snapshot file name"
    )
    file_suffix: str = Field(
        default=".json",
        min_length=1,
        description="Fixed suffix of every snapshot file name"
    )
    timestamp_format: str = Field(
        default="%Y%m%d_%H%M%S",
        description="strftime format of the timestamp token"
    )
    display_format: str = Field(
        default="%b %d, %Y - %H:%M",
        description="strftime format used when showing a snapshot date"
    )

    @field_validator('file_prefix', 'file_suffix')
    @classmethod
    def reject_path_separators(cls, v: str) -> str:
        """Snapshot names must stay inside the backup directory."""
        if "/" in v or "\\" in v:
            raise ValueError("Backup file prefix/suffix cannot contain path separators")
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
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local logs"
    )

    # Audit trail
    persist_audit_events: bool = Field(
        default=True,
        description="Keep audit events in local storage as well as the log"
    )
    audit_max_events: int = Field(
        default=500,
        ge=10,
        le=10000,
        description="How many audit events are kept before the oldest are dropped"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()


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
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def preferences(self) -> PreferenceSettings:
        return PreferenceSettings()

    @property
    def budget(self) -> BudgetSettings:
        return BudgetSettings()

    @property
    def backup(self) -> BackupSettings:
        return BackupSettings()

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

    Returns a dict of {setting_name: is_valid}, with an
    additional "<name>_error" entry for every failure.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "preferences", "budget", "backup", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
