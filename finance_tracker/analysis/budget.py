"""
Budget Status and Alerts

Classifies monthly expenses against the budget and builds the text of
budget notifications. Showing the notification is the caller's job.
"""

from typing import Optional

from finance_tracker.models.budget import BudgetAlert, BudgetStatus, BudgetTier


APPROACHING_THRESHOLD = 80.0
EXCEEDED_THRESHOLD = 100.0


def budget_status(
    expenses: float,
    budget: float,
    approaching_threshold: float = APPROACHING_THRESHOLD,
    exceeded_threshold: float = EXCEEDED_THRESHOLD,
) -> BudgetStatus:
    """
    Percentage of the budget spent, and its tier.

    A budget of zero or less means no budget is set: the tier is
    UNSET and there is no percentage.
    """
    if budget <= 0:
        return BudgetStatus(tier=BudgetTier.UNSET)

    percentage = (expenses / budget) * 100
    if percentage >= exceeded_threshold:
        tier = BudgetTier.EXCEEDED
    elif percentage >= approaching_threshold:
        tier = BudgetTier.APPROACHING
    else:
        tier = BudgetTier.NORMAL
    return BudgetStatus(tier=tier, percentage=percentage)


def build_budget_alert(
    expenses: float,
    budget: float,
    currency_symbol: str,
    notifications_enabled: bool,
    force: bool = False,
    approaching_threshold: float = APPROACHING_THRESHOLD,
    exceeded_threshold: float = EXCEEDED_THRESHOLD,
) -> Optional[BudgetAlert]:
    """
    Build a budget notification, or None if none should be shown.

    Nothing is shown when notifications are disabled or spending is
    below the approaching threshold, unless `force` is set. Without a
    budget there is never an alert. Amounts in the message are
    truncated to whole units.
    """
    if not notifications_enabled and not force:
        return None

    status = budget_status(expenses, budget, approaching_threshold, exceeded_threshold)
    if status.tier == BudgetTier.UNSET:
        return None
    if status.tier == BudgetTier.NORMAL and not force:
        return None

    if status.tier == BudgetTier.EXCEEDED:
        title = "Budget Exceeded!"
        message = (
            f"You've spent {currency_symbol}{int(expenses)} and exceeded "
            f"your monthly budget of {currency_symbol}{int(budget)}"
        )
    else:
        title = "Budget Alert"
        message = (
            f"You've spent {currency_symbol}{int(expenses)} which is "
            f"{status.display_percentage}% of your monthly budget"
        )

    return BudgetAlert(
        tier=status.tier,
        title=title,
        message=message,
        percentage=status.percentage,
    )
