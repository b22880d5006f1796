"""
Audit Logger

DESIGN DECISION: Every change to stored data is logged.
This provides:
1. Complete traceability
2. Debugging capability
3. User can see the history of their data

The audit logger:
- Gracefully handles failures (doesn't crash the app if logging fails)
- Writes a structured local log line for every event
- Optionally keeps the event in the audit trail storage
"""

import logging
from typing import Optional

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from finance_tracker.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route finance_tracker log lines to stderr at the given level."""
    package_logger = logging.getLogger("finance_tracker")
    package_logger.setLevel(level.upper())
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit trail storage (for the user-visible history), if configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            return self._storage.append_event(event)

        return True

    def log_storage_error(self, operation: str, error: Exception) -> None:
        """Log a failed read or write against local storage."""
        self.log(AuditEventBuilder.storage_error(operation, str(error)))

    def recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent persisted events, newest first. Empty without storage."""
        if self._storage is None:
            return []
        return self._storage.get_recent_events(limit)
