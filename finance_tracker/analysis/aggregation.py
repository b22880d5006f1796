"""
Aggregation Functions

DESIGN DECISION: Aggregation is PURE.
Every function takes a list of transactions (and, where time matters,
a reference date) and returns a new value. Nothing here reads or
writes storage, so screens can call these as often as they like.

Month numbers are 1-based (January = 1).
"""

import calendar
from collections import defaultdict
from datetime import datetime, tzinfo
from typing import Iterable, Optional

from finance_tracker.models.budget import CategoryShare, Totals
from finance_tracker.models.transaction import Transaction, datetime_to_epoch_millis


def shift_months(moment: datetime, months: int) -> datetime:
    """
    Move a datetime by whole calendar months.

    The day is clamped to the length of the target month,
    so March 31 minus one month is February 28 (or 29).
    """
    month_index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def filter_by_month(
    transactions: Iterable[Transaction],
    month: int,
    year: int,
    tz: Optional[tzinfo] = None,
) -> list[Transaction]:
    """Transactions whose date falls in the given calendar month and year."""
    result = []
    for transaction in transactions:
        moment = transaction.occurred_at(tz)
        if moment.month == month and moment.year == year:
            result.append(transaction)
    return result


def filter_by_year(
    transactions: Iterable[Transaction],
    year: int,
    tz: Optional[tzinfo] = None,
) -> list[Transaction]:
    """Transactions whose date falls in the given calendar year."""
    return [t for t in transactions if t.occurred_at(tz).year == year]


def filter_by_relative_range(
    transactions: Iterable[Transaction],
    months_back: int,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> list[Transaction]:
    """
    Transactions dated on or after `now` moved back `months_back` months.

    The cutoff keeps the time of day of `now`, so "last 3 months" on
    May 15 at 10:00 starts on Feb 15 at 10:00.
    """
    now = now or datetime.now(tz)
    cutoff = datetime_to_epoch_millis(shift_months(now, -months_back))
    return [t for t in transactions if t.date >= cutoff]


def calculate_totals(transactions: Iterable[Transaction]) -> Totals:
    """Income, expenses and balance (income - expenses)."""
    income = 0.0
    expenses = 0.0
    for transaction in transactions:
        if transaction.is_expense:
            expenses += transaction.amount
        else:
            income += transaction.amount
    return Totals(income=income, expenses=expenses, balance=income - expenses)


def group_by_category(transactions: Iterable[Transaction]) -> dict[str, float]:
    """
    Expense totals per category.

    Income is ignored and categories summing to zero are left out.
    """
    groups: dict[str, float] = defaultdict(float)
    for transaction in transactions:
        if transaction.is_expense:
            groups[transaction.category] += transaction.amount
    return {category: total for category, total in groups.items() if total > 0}


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryShare]:
    """Expense categories with their share of total expenses, largest first."""
    groups = group_by_category(transactions)
    total = sum(groups.values())
    if total <= 0:
        return []

    shares = [
        CategoryShare(
            category=category,
            amount=amount,
            percentage=min(amount / total * 100, 100.0),
        )
        for category, amount in groups.items()
    ]
    shares.sort(key=lambda share: share.amount, reverse=True)
    return shares


def sort_by_date(
    transactions: Iterable[Transaction],
    newest_first: bool = True,
) -> list[Transaction]:
    """Transactions ordered by effective date."""
    return sorted(transactions, key=lambda t: t.date, reverse=newest_first)
