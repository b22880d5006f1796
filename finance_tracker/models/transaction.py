"""
Transaction Models for Finance Tracker

A transaction is a single income or expense entry. The store persists
the whole list as one versioned collection.

DESIGN DECISION: Decoding fails closed. A corrupt payload reads as an
empty collection and a bad record is skipped, so a damaged file can
never stop the app from starting.
"""

from datetime import datetime, timedelta, tzinfo
from typing import Annotated, Any, Optional
from uuid import uuid4

import structlog
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError


COLLECTION_VERSION = 1

# Categories offered by the entry form. The store accepts any string.
DEFAULT_CATEGORIES = (
    "Food",
    "Transport",
    "Bills",
    "Entertainment",
    "Shopping",
    "Health",
    "Education",
    "Salary",
    "Other",
)

# Labels are trimmed; ids are kept exactly as stored.
TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True)]

logger = structlog.get_logger(__name__)


def epoch_millis_to_datetime(millis: int, tz: Optional[tzinfo] = None) -> datetime:
    """
    Convert epoch milliseconds to a datetime, exact to the millisecond.

    With tz=None the result is naive local time.
    """
    seconds, remainder = divmod(millis, 1000)
    return datetime.fromtimestamp(seconds, tz) + timedelta(milliseconds=remainder)


def datetime_to_epoch_millis(moment: datetime) -> int:
    """
    Convert a datetime (naive means local time) to epoch milliseconds.

    Rounds toward the past, so times before 1970 stay exact.
    """
    whole_seconds = int(moment.replace(microsecond=0).timestamp())
    return whole_seconds * 1000 + moment.microsecond // 1000


class Transaction(BaseModel):
    """
    A single income or expense entry.

    `date` is the effective date in epoch milliseconds, independent
    of when the entry was created. `is_expense` is stored as
    "isExpense" so snapshots keep the on-disk layout of older exports.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique transaction ID, never reassigned"
    )
    title: TrimmedStr = Field(
        ...,
        description="Free-text label"
    )
    amount: float = Field(
        ...,
        gt=0,
        description="Positive amount, currency-agnostic"
    )
    category: TrimmedStr = Field(
        ...,
        description="Free-text category"
    )
    date: int = Field(
        ...,
        description="Effective date as epoch milliseconds"
    )
    is_expense: bool = Field(
        ...,
        alias="isExpense",
        description="True for an outflow, False for an inflow"
    )

    def occurred_at(self, tz: Optional[tzinfo] = None) -> datetime:
        """Effective date as a datetime in tz (local time when None)."""
        return epoch_millis_to_datetime(self.date, tz)

    def to_record(self) -> dict[str, Any]:
        """Serialize using the persisted field names."""
        return self.model_dump(by_alias=True)


class TransactionCollection(BaseModel):
    """
    Versioned envelope around the full transaction list.

    Used both for the persisted record set and for backup snapshots.
    """

    version: int = Field(
        default=COLLECTION_VERSION,
        ge=1,
        description="Serialization format version"
    )
    transactions: list[Transaction] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "transactions": [t.to_record() for t in self.transactions],
        }

    @classmethod
    def from_payload(cls, payload: Any) -> "TransactionCollection":
        """
        Build a collection from decoded JSON.

        Accepts the versioned envelope or a bare list of records.
        Anything else yields an empty collection. Records without
        an id, or that fail validation, are skipped.
        """
        if isinstance(payload, list):
            version, records = COLLECTION_VERSION, payload
        elif isinstance(payload, dict) and isinstance(payload.get("transactions"), list):
            version, records = payload.get("version", COLLECTION_VERSION), payload["transactions"]
        else:
            if payload is not None:
                logger.warning("transaction_payload_unrecognized", payload_type=type(payload).__name__)
            return cls()

        if version != COLLECTION_VERSION:
            logger.warning("transaction_payload_version_mismatch", version=version)
            return cls()

        transactions = []
        for record in records:
            if not isinstance(record, dict) or not record.get("id"):
                continue
            try:
                transactions.append(Transaction.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    "transaction_record_skipped",
                    transaction_id=str(record.get("id")),
                    error_count=e.error_count(),
                )
        return cls(transactions=transactions)
