"""
Budget and Summary Models

Results produced by the analysis functions. None of these are
persisted except BudgetTier, which the preference record uses to
remember which alert was already raised this month.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from finance_tracker.models.transaction import Transaction


class BudgetTier(str, Enum):
    """
    Budget status classification.

    UNSET is distinct from NORMAL so a missing budget never reads
    as "0% used".
    """
    UNSET = "unset"
    NORMAL = "normal"
    APPROACHING = "approaching"
    EXCEEDED = "exceeded"

    @property
    def rank(self) -> int:
        """Ordering used to decide whether a tier is worse than another."""
        return _TIER_RANK[self]


_TIER_RANK = {
    BudgetTier.UNSET: 0,
    BudgetTier.NORMAL: 1,
    BudgetTier.APPROACHING: 2,
    BudgetTier.EXCEEDED: 3,
}


class PeriodSelection(str, Enum):
    """Period choices offered by the home screen."""
    CURRENT_MONTH = "current_month"
    LAST_MONTH = "last_month"
    LAST_3_MONTHS = "last_3_months"
    LAST_6_MONTHS = "last_6_months"
    THIS_YEAR = "this_year"
    ALL = "all"
    SPECIFIC_MONTH = "specific_month"  # a month of the current year


class Totals(BaseModel):
    """Income, expenses and balance for a set of transactions."""

    income: float = 0.0
    expenses: float = 0.0
    balance: float = 0.0


class CategoryShare(BaseModel):
    """One slice of the expense breakdown."""

    category: str
    amount: float = Field(ge=0)
    percentage: float = Field(
        ge=0.0,
        le=100.0,
        description="Share of total expenses"
    )


class BudgetStatus(BaseModel):
    """
    Expenses measured against the monthly budget.

    `percentage` is the raw value and may exceed 100.
    It is None when no budget is set.
    """

    tier: BudgetTier
    percentage: Optional[float] = None

    @computed_field
    @property
    def display_percentage(self) -> int:
        """Percentage truncated (not rounded) to an integer."""
        if self.percentage is None:
            return 0
        return int(self.percentage)

    @computed_field
    @property
    def progress(self) -> int:
        """Progress bar value, clamped to 0..100."""
        return max(0, min(self.display_percentage, 100))


class BudgetAlert(BaseModel):
    """Content of a budget notification. Display is up to the caller."""

    tier: BudgetTier
    title: str
    message: str
    percentage: float


class PeriodSummary(BaseModel):
    """Everything the home screen shows for a selected period."""

    period: PeriodSelection
    month: Optional[int] = Field(default=None, ge=1, le=12)
    transactions: list[Transaction] = Field(default_factory=list)
    totals: Totals = Field(default_factory=Totals)
    budget: BudgetStatus
    currency_symbol: str = "$"

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)
