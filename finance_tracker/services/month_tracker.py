"""
Month-Boundary Tracker

Detects that the calendar month changed since the app was last used
and runs the rollover steps.

DESIGN DECISION: The marker is overwritten BEFORE the rollover steps
run. However often the app comes to the foreground, the rollover
fires at most once per calendar month.

States:
- Uninitialized: no marker stored. The first check records the
  current month and reports no change.
- Tracking: marker stored. A check reports a change only when the
  marker differs from the current month/year.
"""

from datetime import datetime
from typing import Callable, Optional

import structlog
from pydantic import ValidationError

from finance_tracker.audit import AuditLogger
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.preferences import MonthMarker
from finance_tracker.storage import KeyValueStorageInterface, StorageError
from finance_tracker.stores import PreferenceStore, TransactionStore


NAMESPACE = "month_tracker_preferences"
MARKER_KEY = "last_seen_month"


class MonthTracker:
    """Rollover detection across app launches."""

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        transactions: TransactionStore,
        preferences: PreferenceStore,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._storage = storage
        self._transactions = transactions
        self._preferences = preferences
        self._audit = audit_logger or AuditLogger()
        self._clock = clock or datetime.now
        self._logger = structlog.get_logger(__name__)
        self._previous: Optional[MonthMarker] = None

    def _load_marker(self) -> Optional[MonthMarker]:
        """Stored marker, or None if absent or unreadable (Uninitialized)."""
        try:
            record = self._storage.get(MARKER_KEY)
        except StorageError as e:
            self._logger.warning("month_marker_unreadable", error=str(e))
            return None

        if record is None:
            return None
        try:
            return MonthMarker.model_validate(record)
        except ValidationError:
            self._logger.warning("month_marker_corrupt")
            return None

    def _save_marker(self, marker: MonthMarker) -> bool:
        try:
            self._storage.put(MARKER_KEY, marker.model_dump())
        except StorageError as e:
            self._audit.log_storage_error("save_month_marker", e)
            return False
        self._logger.debug("month_marker_saved", month=marker.month, year=marker.year)
        return True

    def current_marker(self) -> Optional[MonthMarker]:
        return self._load_marker()

    def has_month_changed(self) -> bool:
        """
        True exactly once per calendar month rollover.

        The first check ever records the baseline and returns False.
        If the new marker cannot be written, no change is reported, so
        the rollover never runs twice for the same month.
        """
        now = self._clock()
        current = MonthMarker(month=now.month, year=now.year)
        marker = self._load_marker()

        if marker is None:
            self._save_marker(current)
            return False

        if marker.matches(current.month, current.year):
            return False

        self._logger.info(
            "month_changed",
            previous=f"{marker.month}/{marker.year}",
            current=f"{current.month}/{current.year}",
        )
        if not self._save_marker(current):
            return False
        self._previous = marker
        return True

    def handle_month_change(self) -> None:
        """
        Run the rollover steps: archive, then reset monthly stats.

        Only meant to be called after has_month_changed() returned True.
        """
        now = self._clock()
        out_of_month = self._transactions.archive_previous_month(now=now)
        self._preferences.reset_monthly_stats()

        previous = (
            f"{self._previous.month}/{self._previous.year}" if self._previous else "unknown"
        )
        self._audit.log(
            AuditEventBuilder.month_changed(
                previous=previous,
                current=f"{now.month}/{now.year}",
                out_of_month_count=len(out_of_month),
            )
        )

    def check_for_month_change(self) -> bool:
        """Check for a rollover and handle it. Returns whether one happened."""
        if not self.has_month_changed():
            return False
        self.handle_month_change()
        return True
