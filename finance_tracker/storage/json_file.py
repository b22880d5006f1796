"""
JSON File Storage Implementation

DESIGN DECISION: Each namespace is one JSON file holding an object of
key -> value, the same shape as a platform preferences file.

TRADEOFFS:
- Every write rewrites the whole file (fine at personal-finance scale)
- No locking; one process, one writer
- A write goes to a temp file in the same directory, is flushed and
  fsynced, then renamed over the target, so readers see either the
  old file or the new one, never a half-written one

The implementation follows the abstract interface, so we can swap
to SQLite later without changing store logic.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.storage.interface import (
    CorruptDataError,
    KeyValueStorageInterface,
    StorageError,
    StorageFactory,
)


logger = structlog.get_logger(__name__)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    retry=retry_if_exception_type(OSError),
    reraise=True,
)
def atomic_write_text(path: Path, text: str) -> None:
    """
    Replace the contents of path with text, all or nothing.

    The temp file is removed on every failure path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class JsonFileStorage(KeyValueStorageInterface):
    """
    One namespace stored as <directory>/<namespace>.json.
    """

    def __init__(self, directory: Path, namespace: str):
        self._namespace = namespace
        self._path = Path(directory) / f"{namespace}.json"

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        """Read the whole namespace. A missing file is an empty namespace."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Namespace file {self._path} is not valid JSON: {e}")

        if not isinstance(data, dict):
            raise CorruptDataError(f"Namespace file {self._path} does not hold an object")
        return data

    def _load_for_update(self) -> dict[str, Any]:
        """Read before a write; a corrupt file is replaced rather than kept."""
        try:
            return self._load()
        except CorruptDataError as e:
            logger.warning(
                "namespace_corrupt_overwriting",
                namespace=self._namespace,
                error=str(e),
            )
            return {}

    def _save(self, data: dict[str, Any]) -> None:
        try:
            text = json.dumps(data, indent=2, sort_keys=True)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for namespace {self._namespace} is not JSON-serializable: {e}")

        try:
            atomic_write_text(self._path, text)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def put(self, key: str, value: Any) -> None:
        self.put_many({key: value})

    def put_many(self, values: dict[str, Any]) -> None:
        data = self._load_for_update()
        data.update(values)
        self._save(data)

    def delete(self, key: str) -> bool:
        data = self._load_for_update()
        if key not in data:
            return False
        del data[key]
        self._save(data)
        return True

    def keys(self) -> list[str]:
        return list(self._load().keys())


def json_file_storage_factory(directory: Path) -> StorageFactory:
    """Factory producing one JsonFileStorage per namespace under directory."""
    def factory(namespace: str) -> KeyValueStorageInterface:
        return JsonFileStorage(directory, namespace)
    return factory
