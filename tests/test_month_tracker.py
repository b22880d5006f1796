"""Tests for MonthTracker rollover detection."""

from datetime import datetime

import pytest

from conftest import make_transaction
from finance_tracker.models import AuditEventType, BudgetTier, MonthMarker
from finance_tracker.services import MonthTracker
from finance_tracker.services.month_tracker import MARKER_KEY
from finance_tracker.storage import StorageError
from finance_tracker.stores import PreferenceStore, TransactionStore


@pytest.fixture
def parts(storage_factory, audit_logger, clock):
    transactions = TransactionStore(storage_factory("transaction_data"), audit_logger, clock=clock)
    preferences = PreferenceStore(storage_factory("finance_preferences"), audit_logger=audit_logger)
    marker_storage = storage_factory("month_tracker_preferences")
    tracker = MonthTracker(
        marker_storage, transactions, preferences, audit_logger=audit_logger, clock=clock
    )
    return tracker, transactions, preferences, marker_storage


class TestHasMonthChanged:
    """Tests for has_month_changed."""

    def test_first_run_records_baseline(self, parts):
        """Test that the first check saves the month and reports no change."""
        tracker, _, _, _ = parts
        assert tracker.has_month_changed() is False
        assert tracker.current_marker() == MonthMarker(month=5, year=2024)

    def test_same_month_no_change(self, parts):
        """Test that repeated checks within a month report nothing."""
        tracker, _, _, _ = parts
        tracker.has_month_changed()
        assert tracker.has_month_changed() is False

    def test_change_reported_once(self, parts, clock):
        """Test that a new month is reported exactly once."""
        tracker, _, _, _ = parts
        tracker.has_month_changed()

        clock.now = datetime(2024, 6, 1, 9, 0)
        assert tracker.has_month_changed() is True
        assert tracker.has_month_changed() is False
        assert tracker.current_marker() == MonthMarker(month=6, year=2024)

    def test_year_change_counts(self, parts, clock):
        """Test that the same month in another year is a change."""
        tracker, _, _, marker_storage = parts
        marker_storage.put(MARKER_KEY, {"month": 5, "year": 2023})
        assert tracker.has_month_changed() is True

    def test_corrupt_marker_treated_as_first_run(self, parts):
        """Test that a damaged marker resets to the current month."""
        tracker, _, _, marker_storage = parts
        marker_storage.put(MARKER_KEY, {"month": 42})
        assert tracker.has_month_changed() is False
        assert tracker.current_marker() == MonthMarker(month=5, year=2024)


class TestCheckForMonthChange:
    """Tests for the full rollover."""

    def test_rollover_resets_monthly_state(self, parts, clock, audit_logger):
        """Test that rollover clears the alert tier and audits the change."""
        tracker, transactions, preferences, _ = parts
        tracker.check_for_month_change()
        preferences.set_monthly_budget(100.0)
        preferences.record_budget_alert(BudgetTier.EXCEEDED)
        transactions.add(make_transaction(when=datetime(2024, 5, 3)))

        clock.now = datetime(2024, 6, 2)
        assert tracker.check_for_month_change() is True
        assert preferences.get_budget_alert_tier() is None
        assert preferences.get_monthly_budget() == 100.0
        assert len(transactions.list_transactions()) == 1

        event = audit_logger.recent_events(1)[0]
        assert event.event_type == AuditEventType.MONTH_CHANGED
        assert event.details["previous"] == "5/2024"
        assert event.details["out_of_month_count"] == 1

    def test_no_rollover_in_same_month(self, parts):
        """Test that nothing runs without a change."""
        tracker, _, preferences, _ = parts
        tracker.check_for_month_change()
        preferences.record_budget_alert(BudgetTier.APPROACHING)
        assert tracker.check_for_month_change() is False
        assert preferences.get_budget_alert_tier() == BudgetTier.APPROACHING


class TestMarkerWriteFailure:
    """Tests for rollover when the marker cannot be saved."""

    def test_unsaved_marker_reports_no_change(self, parts, clock):
        """Test that a failed marker write does not trigger the rollover."""
        tracker, _, preferences, marker_storage = parts
        tracker.check_for_month_change()
        preferences.record_budget_alert(BudgetTier.EXCEEDED)

        def failing_put_many(values):
            raise StorageError("read-only")

        marker_storage.put_many = failing_put_many
        clock.now = datetime(2024, 6, 1, 9, 0)

        assert tracker.has_month_changed() is False
        assert tracker.check_for_month_change() is False
        assert preferences.get_budget_alert_tier() == BudgetTier.EXCEEDED
        assert tracker.current_marker() == MonthMarker(month=5, year=2024)
