"""Shared fixtures: in-memory storage, controllable clocks, file-backed storage."""

from datetime import datetime

import pytest

from finance_tracker.audit import AuditLogger
from finance_tracker.models import Transaction, datetime_to_epoch_millis
from finance_tracker.storage import (
    InMemoryStorage,
    InMemoryStorageFactory,
    JsonFileStorage,
    KeyValueAuditStorage,
)


class FakeClock:
    """Callable clock whose time the test moves by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_transaction(
    title="Lunch",
    amount=10.0,
    category="Food",
    when=datetime(2024, 5, 10, 12, 0),
    is_expense=True,
    **kwargs,
) -> Transaction:
    """Transaction dated at a naive local datetime."""
    return Transaction(
        title=title,
        amount=amount,
        category=category,
        date=datetime_to_epoch_millis(when),
        is_expense=is_expense,
        **kwargs,
    )


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 15, 10, 0))


@pytest.fixture
def storage_factory():
    return InMemoryStorageFactory()


@pytest.fixture
def memory_storage():
    return InMemoryStorage()


@pytest.fixture
def json_storage(tmp_path):
    return JsonFileStorage(tmp_path, "test_namespace")


@pytest.fixture
def audit_storage():
    return KeyValueAuditStorage(InMemoryStorage())


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)
