"""Tests for PreferenceStore and configuration."""

import pytest

from finance_tracker.config import (
    AppSettings,
    BackupSettings,
    BudgetSettings,
    PreferenceSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from finance_tracker.models import AuditEventType, BudgetTier
from finance_tracker.stores import PreferenceStore
from finance_tracker.stores.preferences import PREFERENCES_KEY


@pytest.fixture
def store(memory_storage, audit_logger):
    return PreferenceStore(memory_storage, audit_logger=audit_logger)


class TestPreferenceStore:
    """Tests for preference getters and setters."""

    def test_defaults_without_record(self, store):
        """Test that nothing stored reads as the defaults."""
        assert store.get_currency_symbol() == "$"
        assert store.get_monthly_budget() == 0.0
        assert store.are_notifications_enabled() is True

    def test_set_and_get(self, store):
        """Test that each setter persists its value."""
        assert store.set_currency_symbol("€") is True
        assert store.set_monthly_budget(1500.0) is True
        assert store.set_notifications_enabled(False) is True
        assert store.get_currency_symbol() == "€"
        assert store.get_monthly_budget() == 1500.0
        assert store.are_notifications_enabled() is False

    def test_negative_budget_rejected(self, store):
        """Test that a negative budget is refused and nothing changes."""
        store.set_monthly_budget(200.0)
        assert store.set_monthly_budget(-1.0) is False
        assert store.get_monthly_budget() == 200.0

    def test_setters_do_not_clobber_each_other(self, store):
        """Test that setting one field keeps the others."""
        store.set_monthly_budget(300.0)
        store.set_currency_symbol("£")
        assert store.get_monthly_budget() == 300.0

    def test_corrupt_record_reads_defaults(self, memory_storage, store):
        """Test that a damaged record falls back to the defaults."""
        memory_storage.put(PREFERENCES_KEY, {"monthly_budget": "lots"})
        assert store.get_monthly_budget() == 0.0

    def test_configured_defaults(self, memory_storage):
        """Test that defaults come from PreferenceSettings."""
        defaults = PreferenceSettings(default_currency_symbol="₹", default_monthly_budget=5000.0)
        store = PreferenceStore(memory_storage, defaults=defaults)
        assert store.get_currency_symbol() == "₹"
        assert store.get_monthly_budget() == 5000.0


class TestMonthlyState:
    """Tests for per-month alert state."""

    def test_record_and_reset(self, store, audit_logger):
        """Test that reset clears the alert tier but keeps the budget."""
        store.set_monthly_budget(100.0)
        store.record_budget_alert(BudgetTier.APPROACHING)
        assert store.get_budget_alert_tier() == BudgetTier.APPROACHING

        assert store.reset_monthly_stats() is True
        assert store.get_budget_alert_tier() is None
        assert store.get_monthly_budget() == 100.0
        assert audit_logger.recent_events(1)[0].event_type == AuditEventType.MONTHLY_STATS_RESET


class TestFirstLaunch:
    """Tests for first-launch initialization."""

    def test_initialize_once(self, memory_storage):
        """Test that defaults are written exactly once."""
        store = PreferenceStore(
            memory_storage, defaults=PreferenceSettings(default_monthly_budget=1000.0)
        )
        assert store.is_first_launch() is True
        assert store.initialize_defaults() is True
        assert store.is_first_launch() is False

        store.set_monthly_budget(50.0)
        assert store.initialize_defaults() is False
        assert store.get_monthly_budget() == 50.0


class TestSettings:
    """Tests for settings validation."""

    def test_budget_thresholds_must_be_ordered(self):
        """Test that approaching must sit below exceeded."""
        with pytest.raises(ValueError):
            BudgetSettings(approaching_threshold=100.0, exceeded_threshold=80.0)

    def test_backup_prefix_rejects_path_separator(self):
        """Test that snapshot names cannot point into other directories."""
        with pytest.raises(ValueError):
            BackupSettings(file_prefix="../evil_")

    def test_backup_dir_defaults_inside_data_dir(self, tmp_path):
        """Test the backup directory fallback."""
        settings = StorageSettings(data_dir=tmp_path)
        assert settings.resolved_backup_dir == tmp_path / "backups"

    def test_env_override(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("FINANCE_TRACKER_BUDGET_APPROACHING_THRESHOLD", "75")
        assert BudgetSettings().approaching_threshold == 75.0

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        """Test the startup check for a bad and a good configuration."""
        get_settings.cache_clear()
        monkeypatch.setenv("FINANCE_TRACKER_BUDGET_APPROACHING_THRESHOLD", "150")
        results = validate_all_settings()
        assert results["budget"] is False
        assert "budget_error" in results
        assert results["storage"] is True
        get_settings.cache_clear()

    def test_log_level_normalized(self):
        """Test that log levels are upper-cased and validated."""
        assert AppSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValueError):
            AppSettings(log_level="chatty")
