"""
Audit Models for Finance Tracker

Every change to stored data is recorded as an audit event.
This provides:
1. Traceability of what happened to the user's data
2. Debugging information when a write is rejected
3. A history the user can look at after a restore or rollover

DESIGN DECISION: Audit logs are append-only. We never modify them;
the oldest entries are only dropped once the configured cap is hit.
Passwords never appear in an event.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_tracker.models.transaction import Transaction
from finance_tracker.models.user import User


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTION_REJECTED = "transaction_rejected"
    TRANSACTIONS_REPLACED = "transactions_replaced"

    # Users and session
    USER_REGISTERED = "user_registered"
    REGISTRATION_REJECTED = "registration_rejected"
    USER_LOGGED_IN = "user_logged_in"
    LOGIN_FAILED = "login_failed"
    USER_LOGGED_OUT = "user_logged_out"
    USER_UPDATED = "user_updated"

    # Month rollover
    MONTH_CHANGED = "month_changed"
    MONTHLY_STATS_RESET = "monthly_stats_reset"

    # Backups
    BACKUP_EXPORTED = "backup_exported"
    BACKUP_RESTORED = "backup_restored"
    BACKUP_DELETED = "backup_deleted"
    BACKUP_FAILED = "backup_failed"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant change creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'user', 'backup')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_record(self) -> dict:
        """Convert to a JSON-safe dict for the audit trail storage."""
        return self.model_dump(mode="json")


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction)
        event = AuditEventBuilder.backup_failed("export", None, "disk full")
    """

    @staticmethod
    def transaction_added(transaction: Transaction) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction.id,
            description=f"Transaction added: {transaction.title}",
            details={
                "amount": transaction.amount,
                "category": transaction.category,
                "is_expense": transaction.is_expense,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(transaction: Transaction) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction.id,
            description=f"Transaction updated: {transaction.title}",
            details={
                "amount": transaction.amount,
                "category": transaction.category,
                "is_expense": transaction.is_expense,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def transaction_rejected(
        transaction_id: str,
        operation: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id or None,
            description=f"Transaction {operation} rejected: {reason}",
            details={
                "operation": operation,
                "reason": reason,
            },
        )

    @staticmethod
    def transactions_replaced(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_REPLACED,
            entity_type="transaction",
            description=f"Transaction list replaced with {count} entries",
            details={"count": count},
        )

    @staticmethod
    def user_registered(user: User) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="user",
            entity_id=user.id,
            description=f"User registered: {user.name}",
            details={"email": user.email},
            is_user_action=True,
        )

    @staticmethod
    def registration_rejected(email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description="Registration rejected: email already registered",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def user_logged_in(user: User) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_LOGGED_IN,
            entity_type="user",
            entity_id=user.id,
            description=f"User logged in: {user.name}",
            is_user_action=True,
        )

    @staticmethod
    def login_failed(email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description="Login failed",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def user_logged_out(user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_LOGGED_OUT,
            entity_type="user",
            entity_id=user_id,
            description="User logged out",
            is_user_action=True,
        )

    @staticmethod
    def user_updated(user: User, session_refreshed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_UPDATED,
            entity_type="user",
            entity_id=user.id,
            description=f"User updated: {user.name}",
            details={"session_refreshed": session_refreshed},
            is_user_action=True,
        )

    @staticmethod
    def month_changed(
        previous: str,
        current: str,
        out_of_month_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_CHANGED,
            description=f"Month changed from {previous} to {current}",
            details={
                "previous": previous,
                "current": current,
                "out_of_month_count": out_of_month_count,
            },
        )

    @staticmethod
    def monthly_stats_reset() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTHLY_STATS_RESET,
            entity_type="preferences",
            description="Monthly stats reset",
        )

    @staticmethod
    def backup_exported(filename: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_EXPORTED,
            entity_type="backup",
            entity_id=filename,
            description=f"Backup exported: {filename}",
            details={"transaction_count": count},
            is_user_action=True,
        )

    @staticmethod
    def backup_restored(filename: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_RESTORED,
            entity_type="backup",
            entity_id=filename,
            description=f"Backup restored: {filename}",
            details={"transaction_count": count},
            is_user_action=True,
        )

    @staticmethod
    def backup_deleted(filename: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_DELETED,
            entity_type="backup",
            entity_id=filename,
            description=f"Backup deleted: {filename}",
            is_user_action=True,
        )

    @staticmethod
    def backup_failed(
        operation: str,
        filename: Optional[str],
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="backup",
            entity_id=filename,
            description=f"Backup {operation} failed",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def storage_error(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
