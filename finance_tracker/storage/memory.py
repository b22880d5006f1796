"""In-memory storage, used by tests and throwaway sessions."""

import json
from typing import Any

from finance_tracker.storage.interface import KeyValueStorageInterface, StorageError


class InMemoryStorage(KeyValueStorageInterface):
    """
    Key-value namespace kept in a dict.

    Values go through a JSON round-trip on write, so callers get the
    same copy semantics and the same serializability checks as the
    file backend.
    """

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def put(self, key: str, value: Any) -> None:
        self.put_many({key: value})

    def put_many(self, values: dict[str, Any]) -> None:
        try:
            encoded = {key: json.dumps(value) for key, value in values.items()}
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value is not JSON-serializable: {e}")
        self._data.update(encoded)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data.keys())


class InMemoryStorageFactory:
    """Hands out one shared InMemoryStorage per namespace."""

    def __init__(self):
        self.namespaces: dict[str, InMemoryStorage] = {}

    def __call__(self, namespace: str) -> InMemoryStorage:
        return self.namespaces.setdefault(namespace, InMemoryStorage())
