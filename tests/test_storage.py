"""Tests for the key-value storage backends and the audit trail storage."""

import json
import os

import pytest

from finance_tracker.models import AuditEventBuilder
from finance_tracker.storage import (
    CorruptDataError,
    InMemoryStorage,
    InMemoryStorageFactory,
    JsonFileStorage,
    KeyValueAuditStorage,
    StorageError,
    atomic_write_text,
    json_file_storage_factory,
)


class TestJsonFileStorage:
    """Tests for the JSON file backend."""

    def test_missing_file_is_empty(self, json_storage):
        """Test that a namespace with no file reads as empty."""
        assert json_storage.get("anything") is None
        assert json_storage.get("anything", 5) == 5
        assert json_storage.keys() == []

    def test_put_and_get(self, json_storage):
        """Test that a value written can be read back."""
        json_storage.put("numbers", [1, 2, 3])
        assert json_storage.get("numbers") == [1, 2, 3]
        assert json_storage.contains("numbers")

    def test_values_survive_a_new_instance(self, tmp_path):
        """Test persistence across storage instances."""
        JsonFileStorage(tmp_path, "prefs").put("budget", 1000.0)
        assert JsonFileStorage(tmp_path, "prefs").get("budget") == 1000.0

    def test_file_is_named_after_namespace(self, tmp_path):
        """Test the on-disk layout."""
        storage = JsonFileStorage(tmp_path, "transaction_data")
        storage.put("all_transactions", [])
        assert storage.path == tmp_path / "transaction_data.json"
        assert json.loads(storage.path.read_text()) == {"all_transactions": []}

    def test_put_many_writes_all_keys(self, json_storage):
        """Test that several keys land in one write."""
        json_storage.put_many({"a": 1, "b": "two"})
        assert sorted(json_storage.keys()) == ["a", "b"]

    def test_delete(self, json_storage):
        """Test that delete reports whether the key existed."""
        json_storage.put("a", 1)
        assert json_storage.delete("a") is True
        assert json_storage.delete("a") is False
        assert json_storage.get("a") is None

    def test_corrupt_file_raises_on_read(self, json_storage):
        """Test that an undecodable namespace raises CorruptDataError."""
        json_storage.path.write_text("{not json")
        with pytest.raises(CorruptDataError):
            json_storage.get("a")

    def test_non_object_file_is_corrupt(self, json_storage):
        """Test that a file holding a list is treated as corrupt."""
        json_storage.path.write_text("[1, 2]")
        with pytest.raises(CorruptDataError):
            json_storage.keys()

    def test_write_replaces_corrupt_file(self, json_storage):
        """Test that a write over a corrupt file recovers the namespace."""
        json_storage.path.write_text("{not json")
        json_storage.put("a", 1)
        assert json_storage.get("a") == 1

    def test_unserializable_value_raises(self, json_storage):
        """Test that a non-JSON value is refused."""
        with pytest.raises(StorageError):
            json_storage.put("bad", object())

    def test_factory_shares_directory(self, tmp_path):
        """Test that the factory opens namespaces under one directory."""
        factory = json_file_storage_factory(tmp_path)
        factory("one").put("k", "v")
        assert (tmp_path / "one.json").exists()
        assert factory("one").get("k") == "v"


class TestAtomicWrite:
    """Tests for atomic_write_text."""

    def test_creates_parent_directory(self, tmp_path):
        """Test that missing parent directories are created."""
        target = tmp_path / "nested" / "file.json"
        atomic_write_text(target, "{}")
        assert target.read_text() == "{}"

    def test_failed_replace_keeps_old_content(self, tmp_path, monkeypatch):
        """Test that a failed rename leaves the old file and no temp file."""
        target = tmp_path / "file.json"
        target.write_text("old")

        def failing_replace(src, dst):
            raise OSError("rename failed")

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(OSError):
            atomic_write_text(target, "new")

        assert target.read_text() == "old"
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]

    def test_failed_write_surfaces_as_storage_error(self, json_storage, monkeypatch):
        """Test that the file backend wraps I/O failures."""
        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(StorageError):
            json_storage.put("a", 1)


class TestInMemoryStorage:
    """Tests for the in-memory backend."""

    def test_put_and_get(self, memory_storage):
        """Test basic round trip."""
        memory_storage.put("a", {"x": 1})
        assert memory_storage.get("a") == {"x": 1}

    def test_returns_copies(self, memory_storage):
        """Test that mutating a returned value does not change storage."""
        memory_storage.put("a", [1])
        memory_storage.get("a").append(2)
        assert memory_storage.get("a") == [1]

    def test_unserializable_value_raises(self, memory_storage):
        """Test the same serializability check as the file backend."""
        with pytest.raises(StorageError):
            memory_storage.put("bad", object())

    def test_failed_put_many_writes_nothing(self, memory_storage):
        """Test that put_many is all or nothing."""
        with pytest.raises(StorageError):
            memory_storage.put_many({"good": 1, "bad": object()})
        assert memory_storage.keys() == []

    def test_factory_shares_namespaces(self):
        """Test that the factory hands out the same namespace twice."""
        factory = InMemoryStorageFactory()
        factory("ns").put("k", 1)
        assert factory("ns").get("k") == 1
        assert factory("other").get("k") is None


class TestKeyValueAuditStorage:
    """Tests for the audit trail storage."""

    def test_recent_events_newest_first(self, audit_storage):
        """Test ordering of recent events."""
        audit_storage.append_event(AuditEventBuilder.transaction_deleted("first"))
        audit_storage.append_event(AuditEventBuilder.transaction_deleted("second"))
        events = audit_storage.get_recent_events()
        assert [e.entity_id for e in events] == ["second", "first"]

    def test_limit(self, audit_storage):
        """Test that the limit is honored."""
        for i in range(5):
            audit_storage.append_event(AuditEventBuilder.transaction_deleted(str(i)))
        assert len(audit_storage.get_recent_events(limit=2)) == 2

    def test_cap_drops_oldest(self):
        """Test that the trail is capped."""
        storage = KeyValueAuditStorage(InMemoryStorage(), max_events=3)
        for i in range(5):
            storage.append_event(AuditEventBuilder.transaction_deleted(str(i)))
        events = storage.get_recent_events()
        assert [e.entity_id for e in events] == ["4", "3", "2"]

    def test_malformed_entries_skipped(self):
        """Test that junk in the trail is ignored."""
        backing = InMemoryStorage()
        backing.put("events", [{"junk": True}, "text"])
        storage = KeyValueAuditStorage(backing)
        storage.append_event(AuditEventBuilder.monthly_stats_reset())
        assert len(storage.get_recent_events()) == 1

    def test_write_failure_returns_false(self):
        """Test that a failing backend does not raise."""
        class BrokenStorage(InMemoryStorage):
            def put_many(self, values):
                raise StorageError("read-only")

        storage = KeyValueAuditStorage(BrokenStorage())
        assert storage.append_event(AuditEventBuilder.monthly_stats_reset()) is False
