"""Tests for budget status and alert text."""

import pytest

from finance_tracker.analysis import budget_status, build_budget_alert
from finance_tracker.models import BudgetTier


class TestBudgetStatus:
    """Tests for budget_status tiers."""

    @pytest.mark.parametrize(
        "expenses,tier",
        [
            (0.0, BudgetTier.NORMAL),
            (79.99, BudgetTier.NORMAL),
            (80.0, BudgetTier.APPROACHING),
            (99.99, BudgetTier.APPROACHING),
            (100.0, BudgetTier.EXCEEDED),
            (120.0, BudgetTier.EXCEEDED),
        ],
    )
    def test_tiers(self, expenses, tier):
        """Test tier boundaries against a budget of 100."""
        assert budget_status(expenses, 100.0).tier == tier

    def test_exceeded_progress_clamped(self):
        """Test that 120 of 100 shows 120% but a full progress bar."""
        status = budget_status(120.0, 100.0)
        assert status.display_percentage == 120
        assert status.progress == 100

    def test_zero_budget_is_unset(self):
        """Test that no budget is not the same as 0% used."""
        status = budget_status(50.0, 0.0)
        assert status.tier == BudgetTier.UNSET
        assert status.percentage is None

    def test_custom_thresholds(self):
        """Test configured thresholds."""
        assert budget_status(70.0, 100.0, approaching_threshold=60.0).tier == BudgetTier.APPROACHING


class TestBudgetAlert:
    """Tests for build_budget_alert."""

    def test_exceeded_text(self):
        """Test the exceeded notification text, amounts truncated."""
        alert = build_budget_alert(1234.56, 1000.0, "$", notifications_enabled=True)
        assert alert.tier == BudgetTier.EXCEEDED
        assert alert.title == "Budget Exceeded!"
        assert alert.message == (
            "You've spent $1234 and exceeded your monthly budget of $1000"
        )

    def test_approaching_text(self):
        """Test the approaching notification text."""
        alert = build_budget_alert(850.0, 1000.0, "€", notifications_enabled=True)
        assert alert.tier == BudgetTier.APPROACHING
        assert alert.title == "Budget Alert"
        assert alert.message == "You've spent €850 which is 85% of your monthly budget"

    def test_below_threshold_no_alert(self):
        """Test that normal spending raises nothing."""
        assert build_budget_alert(100.0, 1000.0, "$", notifications_enabled=True) is None

    def test_disabled_notifications(self):
        """Test that disabled notifications suppress alerts."""
        assert build_budget_alert(2000.0, 1000.0, "$", notifications_enabled=False) is None

    def test_force_overrides_switch_and_threshold(self):
        """Test that force shows an alert regardless."""
        alert = build_budget_alert(100.0, 1000.0, "$", notifications_enabled=False, force=True)
        assert alert is not None
        assert alert.message == "You've spent $100 which is 10% of your monthly budget"

    def test_no_budget_no_alert(self):
        """Test that there is never an alert without a budget."""
        assert build_budget_alert(100.0, 0.0, "$", notifications_enabled=True, force=True) is None
