"""Preference and month marker records."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finance_tracker.models.budget import BudgetTier


class Preferences(BaseModel):
    """
    User settings, a single record with no identity.

    `budget_alert_tier` is per-month state: the highest alert tier
    already raised this month. It is cleared on month rollover.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    currency_symbol: str = Field(
        default="$",
        min_length=1,
        max_length=5,
    )
    monthly_budget: float = Field(
        default=0.0,
        ge=0.0,
        description="Monthly budget, 0 means unset"
    )
    notifications_enabled: bool = True
    budget_alert_tier: Optional[BudgetTier] = None


class MonthMarker(BaseModel):
    """Last calendar month/year seen by the rollover tracker."""

    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1)

    def matches(self, month: int, year: int) -> bool:
        return self.month == month and self.year == year
