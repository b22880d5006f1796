"""
Preference Store

A single persisted Preferences record with fixed defaults. A missing
or corrupt record reads as the defaults.
"""

from typing import Optional

import structlog
from pydantic import ValidationError

from finance_tracker.audit import AuditLogger
from finance_tracker.config import PreferenceSettings
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.budget import BudgetTier
from finance_tracker.models.preferences import Preferences
from finance_tracker.storage import KeyValueStorageInterface, StorageError


NAMESPACE = "finance_preferences"
PREFERENCES_KEY = "preferences"
FIRST_LAUNCH_KEY = "initialized"


class PreferenceStore:
    """Get/set access to the user's settings."""

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        defaults: Optional[PreferenceSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._defaults = defaults or PreferenceSettings()
        self._audit = audit_logger or AuditLogger()
        self._logger = structlog.get_logger(__name__)

    def _default_preferences(self) -> Preferences:
        return Preferences(
            currency_symbol=self._defaults.default_currency_symbol,
            monthly_budget=self._defaults.default_monthly_budget,
            notifications_enabled=self._defaults.default_notifications_enabled,
        )

    def get_preferences(self) -> Preferences:
        try:
            record = self._storage.get(PREFERENCES_KEY)
        except StorageError as e:
            self._logger.warning("preferences_unreadable", error=str(e))
            return self._default_preferences()

        if record is None:
            return self._default_preferences()
        try:
            return Preferences.model_validate(record)
        except ValidationError:
            self._logger.warning("preferences_corrupt_using_defaults")
            return self._default_preferences()

    def _save(self, preferences: Preferences, operation: str) -> bool:
        try:
            self._storage.put(PREFERENCES_KEY, preferences.model_dump(mode="json"))
        except StorageError as e:
            self._audit.log_storage_error(operation, e)
            return False
        return True

    def _update(self, operation: str, **changes) -> bool:
        current = self.get_preferences()
        try:
            updated = Preferences.model_validate({**current.model_dump(), **changes})
        except ValidationError as e:
            self._logger.warning(
                "preference_rejected",
                operation=operation,
                error_count=e.error_count(),
            )
            return False
        return self._save(updated, operation)

    # Currency

    def get_currency_symbol(self) -> str:
        return self.get_preferences().currency_symbol

    def set_currency_symbol(self, symbol: str) -> bool:
        return self._update("set_currency_symbol", currency_symbol=symbol)

    # Budget

    def get_monthly_budget(self) -> float:
        return self.get_preferences().monthly_budget

    def set_monthly_budget(self, budget: float) -> bool:
        """Set the monthly budget. Negative values are rejected."""
        return self._update("set_monthly_budget", monthly_budget=budget)

    # Notifications

    def are_notifications_enabled(self) -> bool:
        return self.get_preferences().notifications_enabled

    def set_notifications_enabled(self, enabled: bool) -> bool:
        return self._update("set_notifications_enabled", notifications_enabled=enabled)

    # Per-month state

    def get_budget_alert_tier(self) -> Optional[BudgetTier]:
        """Highest budget alert tier already raised this month."""
        return self.get_preferences().budget_alert_tier

    def record_budget_alert(self, tier: BudgetTier) -> bool:
        return self._update("record_budget_alert", budget_alert_tier=tier)

    def reset_monthly_stats(self) -> bool:
        """Clear per-month state. Budget and currency are left alone."""
        if not self._update("reset_monthly_stats", budget_alert_tier=None):
            return False
        self._audit.log(AuditEventBuilder.monthly_stats_reset())
        return True

    # First launch

    def is_first_launch(self) -> bool:
        try:
            return not self._storage.get(FIRST_LAUNCH_KEY, False)
        except StorageError as e:
            self._logger.warning("preferences_unreadable", error=str(e))
            return True

    def initialize_defaults(self) -> bool:
        """
        Write the configured defaults once, on first launch.

        Returns True if the defaults were written by this call.
        """
        if not self.is_first_launch():
            return False

        try:
            self._storage.put_many({
                PREFERENCES_KEY: self._default_preferences().model_dump(mode="json"),
                FIRST_LAUNCH_KEY: True,
            })
        except StorageError as e:
            self._audit.log_storage_error("initialize_preferences", e)
            return False

        self._logger.info("preferences_initialized")
        return True
