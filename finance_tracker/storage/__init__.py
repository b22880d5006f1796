"""
Storage Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements JSON files on local disk as the backend, plus an
in-memory backend for tests, but designed to be swappable.
"""

from finance_tracker.storage.interface import (
    AuditStorageInterface,
    CorruptDataError,
    KeyValueStorageInterface,
    StorageError,
    StorageFactory,
)
from finance_tracker.storage.json_file import (
    JsonFileStorage,
    atomic_write_text,
    json_file_storage_factory,
)
from finance_tracker.storage.memory import InMemoryStorage, InMemoryStorageFactory
from finance_tracker.storage.audit import KeyValueAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStorageInterface",
    "StorageFactory",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    # JSON file implementation
    "JsonFileStorage",
    "atomic_write_text",
    "json_file_storage_factory",
    # In-memory implementation
    "InMemoryStorage",
    "InMemoryStorageFactory",
    # Audit trail
    "KeyValueAuditStorage",
]
