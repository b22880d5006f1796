"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep each store's data in its own namespace (one file per namespace)
2. Use in-memory storage for testing
3. Swap the JSON files for a real database later
4. Keep store logic decoupled from how bytes reach the disk

The interface is intentionally simple - a namespaced key-value area
holding JSON-compatible values. Stores read a whole value, change it
in memory and write it back whole.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

from finance_tracker.models.audit import AuditEvent


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for one namespace of key-value storage.

    Values are JSON-compatible (dicts, lists, strings, numbers, bools).
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Read a value.

        Args:
            key: The key to read
            default: Returned when the key is absent

        Raises:
            CorruptDataError: If the namespace cannot be decoded
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def put(self, key: str, value: Any) -> None:
        """
        Write a value, replacing any previous one.

        The write is all-or-nothing: a failure leaves the
        previous state in place.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def put_many(self, values: dict[str, Any]) -> None:
        """
        Write several values as a single all-or-nothing write.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed and was removed

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List the keys present in this namespace."""
        pass

    def contains(self, key: str) -> bool:
        return key in self.keys()


# Builds the storage for a namespace, e.g. "transaction_data".
StorageFactory = Callable[[str], KeyValueStorageInterface]


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Stored data exists but cannot be decoded."""
    pass
