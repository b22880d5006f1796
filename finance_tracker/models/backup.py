"""Backup result models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from finance_tracker.models.transaction import Transaction


class BackupResult(BaseModel):
    """
    Result of a backup export or import.

    On success `filename` names the snapshot; an import also carries
    the restored transactions. On failure `error_message` says why.
    """

    success: bool
    filename: Optional[str] = None
    transactions: list[Transaction] = Field(default_factory=list)
    error_message: Optional[str] = None

    @classmethod
    def failed(cls, message: str, filename: Optional[str] = None) -> "BackupResult":
        return cls(success=False, filename=filename, error_message=message)


class BackupFileInfo(BaseModel):
    """A snapshot file as listed for the restore screen."""

    filename: str
    created_at: Optional[datetime] = None
    display_name: str
