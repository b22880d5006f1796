"""
Key-Value Audit Storage

Keeps the audit trail as a capped list under a single key.
The oldest events are dropped once the cap is reached.
"""

import structlog
from pydantic import ValidationError

from finance_tracker.models.audit import AuditEvent
from finance_tracker.storage.interface import (
    AuditStorageInterface,
    KeyValueStorageInterface,
    StorageError,
)


EVENTS_KEY = "events"

logger = structlog.get_logger(__name__)


class KeyValueAuditStorage(AuditStorageInterface):
    """Audit trail kept in a key-value namespace."""

    def __init__(self, storage: KeyValueStorageInterface, max_events: int = 500):
        self._storage = storage
        self._max_events = max_events

    def _load_records(self) -> list[dict]:
        records = self._storage.get(EVENTS_KEY, [])
        if not isinstance(records, list):
            return []
        return [record for record in records if isinstance(record, dict)]

    def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            records = self._load_records()
        except StorageError as e:
            logger.warning("audit_trail_unreadable", error=str(e))
            records = []

        records.append(event.to_record())
        records = records[-self._max_events:]

        try:
            self._storage.put(EVENTS_KEY, records)
            return True
        except StorageError as e:
            # Don't raise - audit logging should not break the main flow
            logger.error(
                "audit_trail_write_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Get recent events, newest first. Malformed entries are skipped."""
        try:
            records = self._load_records()
        except StorageError as e:
            logger.warning("audit_trail_unreadable", error=str(e))
            return []

        events = []
        for record in reversed(records):
            try:
                events.append(AuditEvent.model_validate(record))
            except ValidationError:
                continue
            if len(events) >= limit:
                break
        return events
