"""
Analysis Package

Pure functions over transaction lists: filters, totals, category
breakdowns, budget status and period selection.
"""

from finance_tracker.analysis.aggregation import (
    calculate_totals,
    category_breakdown,
    filter_by_month,
    filter_by_relative_range,
    filter_by_year,
    group_by_category,
    shift_months,
    sort_by_date,
)
from finance_tracker.analysis.budget import (
    APPROACHING_THRESHOLD,
    EXCEEDED_THRESHOLD,
    budget_status,
    build_budget_alert,
)
from finance_tracker.analysis.periods import period_label, select_period

__all__ = [
    "APPROACHING_THRESHOLD",
    "EXCEEDED_THRESHOLD",
    "budget_status",
    "build_budget_alert",
    "calculate_totals",
    "category_breakdown",
    "filter_by_month",
    "filter_by_relative_range",
    "filter_by_year",
    "group_by_category",
    "period_label",
    "select_period",
    "shift_months",
    "sort_by_date",
]
