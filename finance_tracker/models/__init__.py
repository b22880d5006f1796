"""
Data Models Package

This package contains all Pydantic models used by the Finance Tracker core.
All data flowing through the stores must conform to these schemas.
"""

from finance_tracker.models.transaction import (
    COLLECTION_VERSION,
    DEFAULT_CATEGORIES,
    Transaction,
    TransactionCollection,
    datetime_to_epoch_millis,
    epoch_millis_to_datetime,
)
from finance_tracker.models.user import (
    RegistrationResult,
    Session,
    User,
    UserUpdateResult,
)
from finance_tracker.models.budget import (
    BudgetAlert,
    BudgetStatus,
    BudgetTier,
    CategoryShare,
    PeriodSelection,
    PeriodSummary,
    Totals,
)
from finance_tracker.models.preferences import MonthMarker, Preferences
from finance_tracker.models.backup import BackupFileInfo, BackupResult
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "COLLECTION_VERSION",
    "DEFAULT_CATEGORIES",
    "Transaction",
    "TransactionCollection",
    "datetime_to_epoch_millis",
    "epoch_millis_to_datetime",
    # User models
    "RegistrationResult",
    "Session",
    "User",
    "UserUpdateResult",
    # Budget models
    "BudgetAlert",
    "BudgetStatus",
    "BudgetTier",
    "CategoryShare",
    "PeriodSelection",
    "PeriodSummary",
    "Totals",
    # Preference models
    "MonthMarker",
    "Preferences",
    # Backup models
    "BackupFileInfo",
    "BackupResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
