"""Services that coordinate stores: month rollover and backups."""

from finance_tracker.services.backup import BackupManager
from finance_tracker.services.month_tracker import MonthTracker

__all__ = ["BackupManager", "MonthTracker"]
