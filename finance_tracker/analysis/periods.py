"""Period selection for the home screen's period picker."""

from datetime import datetime, tzinfo
from typing import Iterable, Optional

from finance_tracker.analysis.aggregation import (
    filter_by_month,
    filter_by_relative_range,
    filter_by_year,
    shift_months,
)
from finance_tracker.models.budget import PeriodSelection
from finance_tracker.models.transaction import Transaction


PERIOD_LABELS = {
    PeriodSelection.CURRENT_MONTH: "Current Month",
    PeriodSelection.LAST_MONTH: "Last Month",
    PeriodSelection.LAST_3_MONTHS: "Last 3 Months",
    PeriodSelection.LAST_6_MONTHS: "Last 6 Months",
    PeriodSelection.THIS_YEAR: "This Year",
    PeriodSelection.ALL: "All Transactions",
}


def select_period(
    transactions: Iterable[Transaction],
    period: PeriodSelection,
    month: Optional[int] = None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> list[Transaction]:
    """
    Transactions for one of the picker's periods.

    SPECIFIC_MONTH needs `month` (1-12) and means that month of the
    current year.

    Raises:
        ValueError: If SPECIFIC_MONTH is chosen without a valid month
    """
    now = now or datetime.now(tz)
    transactions = list(transactions)

    if period == PeriodSelection.CURRENT_MONTH:
        return filter_by_month(transactions, now.month, now.year, tz)
    if period == PeriodSelection.LAST_MONTH:
        previous = shift_months(now, -1)
        return filter_by_month(transactions, previous.month, previous.year, tz)
    if period == PeriodSelection.LAST_3_MONTHS:
        return filter_by_relative_range(transactions, 3, now, tz)
    if period == PeriodSelection.LAST_6_MONTHS:
        return filter_by_relative_range(transactions, 6, now, tz)
    if period == PeriodSelection.THIS_YEAR:
        return filter_by_year(transactions, now.year, tz)
    if period == PeriodSelection.SPECIFIC_MONTH:
        if month is None or not 1 <= month <= 12:
            raise ValueError(f"A month between 1 and 12 is required, got {month!r}")
        return filter_by_month(transactions, month, now.year, tz)
    return transactions


def period_label(period: PeriodSelection, month: Optional[int] = None) -> str:
    """Human-readable name of a period, e.g. "Last Month" or "March"."""
    if period == PeriodSelection.SPECIFIC_MONTH and month is not None:
        return datetime(2000, month, 1).strftime("%B")
    return PERIOD_LABELS.get(period, period.value)
