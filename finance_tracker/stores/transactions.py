"""
Transaction Store

Owns the durable list of transactions. Every mutation is a
read-modify-write of the whole collection: read it, change it in
memory, write it back as one unit.

GUARANTEES:
- No two persisted transactions share an id
- add/update/delete on a bad or unknown id change nothing and say so
- A corrupt or missing record set reads as an empty list
"""

from datetime import datetime, tzinfo
from typing import Callable, Optional

import structlog

from finance_tracker.audit import AuditLogger
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.transaction import Transaction, TransactionCollection
from finance_tracker.storage import KeyValueStorageInterface, StorageError


NAMESPACE = "transaction_data"
TRANSACTIONS_KEY = "all_transactions"


class TransactionStore:
    """
    Durable, ordered list of transactions with unique ids.

    Not safe for concurrent writers; callers serialize access.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        self._clock = clock or datetime.now
        self._logger = structlog.get_logger(__name__)

    def _read(self) -> list[Transaction]:
        try:
            payload = self._storage.get(TRANSACTIONS_KEY)
        except StorageError as e:
            self._logger.warning("transactions_unreadable", error=str(e))
            return []
        return TransactionCollection.from_payload(payload).transactions

    def _write(self, transactions: list[Transaction], operation: str) -> bool:
        collection = TransactionCollection(transactions=transactions)
        try:
            self._storage.put(TRANSACTIONS_KEY, collection.to_payload())
        except StorageError as e:
            self._audit.log_storage_error(operation, e)
            return False
        self._logger.debug("transactions_saved", count=len(transactions))
        return True

    def _reject(self, transaction_id: str, operation: str, reason: str) -> bool:
        self._audit.log(
            AuditEventBuilder.transaction_rejected(transaction_id, operation, reason)
        )
        return False

    def list_transactions(self) -> list[Transaction]:
        """All transactions in insertion order."""
        transactions = self._read()
        self._logger.debug("transactions_retrieved", count=len(transactions))
        return transactions

    def get(self, transaction_id: str) -> Optional[Transaction]:
        """Look up a single transaction by id."""
        if not transaction_id:
            return None
        for transaction in self._read():
            if transaction.id == transaction_id:
                return transaction
        return None

    def add(self, transaction: Transaction) -> bool:
        """
        Append a transaction.

        Returns False (and changes nothing) if the id is empty or
        already present, or if the write fails.
        """
        if not transaction.id:
            return self._reject("", "add", "empty id")

        transactions = self._read()
        if any(t.id == transaction.id for t in transactions):
            return self._reject(transaction.id, "add", "id already exists")

        transactions.append(transaction)
        if not self._write(transactions, "add_transaction"):
            return False

        self._audit.log(AuditEventBuilder.transaction_added(transaction))
        return True

    def update(self, transaction: Transaction) -> bool:
        """
        Replace the transaction with the same id, keeping its position.

        Returns False if the id is empty or unknown, or if the write fails.
        """
        if not transaction.id:
            return self._reject("", "update", "empty id")

        transactions = self._read()
        index = next(
            (i for i, t in enumerate(transactions) if t.id == transaction.id),
            None,
        )
        if index is None:
            return self._reject(transaction.id, "update", "not found")

        transactions[index] = transaction
        if not self._write(transactions, "update_transaction"):
            return False

        self._audit.log(AuditEventBuilder.transaction_updated(transaction))
        return True

    def delete(self, transaction_id: str) -> bool:
        """
        Remove the transaction with this id.

        Returns False if the id is empty or unknown, or if the write fails.
        Deleting the same id twice leaves the same state as deleting once.
        """
        if not transaction_id:
            return self._reject("", "delete", "empty id")

        transactions = self._read()
        remaining = [t for t in transactions if t.id != transaction_id]
        if len(remaining) == len(transactions):
            return self._reject(transaction_id, "delete", "not found")

        if not self._write(remaining, "delete_transaction"):
            return False

        self._audit.log(AuditEventBuilder.transaction_deleted(transaction_id))
        return True

    def save_all(self, transactions: list[Transaction]) -> bool:
        """
        Overwrite the whole collection.

        Used by restore. Records with an empty id are dropped, and for
        a repeated id only the first record is kept, so the stored set
        stays unique.
        """
        kept = []
        seen_ids = set()
        for transaction in transactions:
            if not transaction.id:
                continue
            if transaction.id in seen_ids:
                self._logger.warning("duplicate_transaction_dropped", transaction_id=transaction.id)
                continue
            seen_ids.add(transaction.id)
            kept.append(transaction)

        if not self._write(kept, "save_all_transactions"):
            return False

        self._audit.log(AuditEventBuilder.transactions_replaced(len(kept)))
        return True

    def archive_previous_month(
        self,
        now: Optional[datetime] = None,
        tz: Optional[tzinfo] = None,
    ) -> list[Transaction]:
        """
        Transactions dated outside the current calendar month.

        Observational only: the result is logged and returned, nothing
        is moved or tagged.
        """
        now = now or self._clock()
        previous = [
            t for t in self._read()
            if not _same_month(t.occurred_at(tz), now)
        ]
        self._logger.info(
            "previous_month_transactions",
            count=len(previous),
            month=now.month,
            year=now.year,
        )
        return previous


def _same_month(moment: datetime, reference: datetime) -> bool:
    return moment.month == reference.month and moment.year == reference.year
