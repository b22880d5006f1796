"""
Backup and Restore

Snapshots of the full transaction list, one file per export, named
<prefix><timestamp><suffix> (finance_backup_20240521_153045.json by
default).

GUARANTEES:
- An export never overwrites an existing snapshot
- Only names matching the snapshot convention are read or deleted,
  so a caller cannot reach files outside the backup directory
- I/O failures come back as failure results with a reason; they are
  never raised and never dropped silently
"""

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import structlog

from finance_tracker.audit import AuditLogger
from finance_tracker.config import BackupSettings
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.backup import BackupFileInfo, BackupResult
from finance_tracker.models.transaction import (
    COLLECTION_VERSION,
    Transaction,
    TransactionCollection,
)
from finance_tracker.storage import atomic_write_text


class BackupManager:
    """Exports, imports, lists and deletes snapshot files."""

    def __init__(
        self,
        backup_dir: Path,
        settings: Optional[BackupSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._backup_dir = Path(backup_dir)
        self._settings = settings or BackupSettings()
        self._audit = audit_logger or AuditLogger()
        self._clock = clock or datetime.now
        self._logger = structlog.get_logger(__name__)
        self._name_pattern = re.compile(
            re.escape(self._settings.file_prefix)
            + r"(?P<stamp>[0-9A-Za-z_\-]+)"
            + re.escape(self._settings.file_suffix)
        )

    @property
    def backup_dir(self) -> Path:
        return self._backup_dir

    def is_backup_filename(self, filename: str) -> bool:
        """True if the name follows the snapshot naming convention."""
        return self._name_pattern.fullmatch(filename) is not None

    def parse_backup_timestamp(self, filename: str) -> Optional[datetime]:
        """Creation time embedded in a snapshot name, or None."""
        match = self._name_pattern.fullmatch(filename)
        if match is None:
            return None
        try:
            return datetime.strptime(match.group("stamp"), self._settings.timestamp_format)
        except ValueError:
            return None

    def format_backup_date(self, filename: str) -> str:
        """Snapshot date for display, e.g. "May 21, 2024 - 15:30"; the name if unparsable."""
        created_at = self.parse_backup_timestamp(filename)
        if created_at is None:
            return filename
        return created_at.strftime(self._settings.display_format)

    def _fail(self, operation: str, message: str, filename: Optional[str] = None) -> BackupResult:
        self._audit.log(AuditEventBuilder.backup_failed(operation, filename, message))
        return BackupResult.failed(message, filename=filename)

    def export_data(self, transactions: list[Transaction]) -> BackupResult:
        """Write the transactions to a new snapshot file."""
        stamp = self._clock().strftime(self._settings.timestamp_format)
        filename = f"{self._settings.file_prefix}{stamp}{self._settings.file_suffix}"
        path = self._backup_dir / filename

        if path.exists():
            return self._fail("export", f"Backup {filename} already exists", filename)

        collection = TransactionCollection(transactions=list(transactions))
        try:
            atomic_write_text(path, json.dumps(collection.to_payload(), indent=2))
        except OSError as e:
            return self._fail("export", f"Could not write backup: {e}", filename)

        self._audit.log(AuditEventBuilder.backup_exported(filename, len(collection.transactions)))
        return BackupResult(success=True, filename=filename)

    def import_data(self, filename: str) -> BackupResult:
        """Read the transactions stored in a snapshot file."""
        if not self.is_backup_filename(filename):
            return self._fail("import", f"Not a backup file: {filename}", filename)

        path = self._backup_dir / filename
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return self._fail("import", f"Backup {filename} not found", filename)
        except OSError as e:
            return self._fail("import", f"Could not read backup: {e}", filename)

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            return self._fail("import", f"Backup {filename} is malformed: {e}", filename)

        if isinstance(payload, dict):
            if not isinstance(payload.get("transactions"), list):
                return self._fail("import", f"Backup {filename} holds no transaction list", filename)
            if payload.get("version", COLLECTION_VERSION) != COLLECTION_VERSION:
                return self._fail(
                    "import",
                    f"Backup {filename} has unsupported version {payload.get('version')!r}",
                    filename,
                )
        elif not isinstance(payload, list):
            return self._fail("import", f"Backup {filename} holds no transaction list", filename)

        transactions = TransactionCollection.from_payload(payload).transactions
        self._logger.info("backup_imported", filename=filename, count=len(transactions))
        return BackupResult(success=True, filename=filename, transactions=transactions)

    def list_backups(self) -> list[str]:
        """Snapshot file names, newest first."""
        try:
            names = [
                entry.name for entry in self._backup_dir.iterdir()
                if entry.is_file() and self.is_backup_filename(entry.name)
            ]
        except FileNotFoundError:
            return []
        except OSError as e:
            self._logger.error("backup_list_failed", error=str(e))
            return []

        return sorted(
            names,
            key=lambda name: (self.parse_backup_timestamp(name) or datetime.min, name),
            reverse=True,
        )

    def list_backup_info(self) -> list[BackupFileInfo]:
        """Snapshots with their parsed creation time, newest first."""
        return [
            BackupFileInfo(
                filename=name,
                created_at=self.parse_backup_timestamp(name),
                display_name=self.format_backup_date(name),
            )
            for name in self.list_backups()
        ]

    def delete_backup(self, filename: str) -> bool:
        """Delete a snapshot. Names outside the convention are refused."""
        if not self.is_backup_filename(filename):
            self._fail("delete", f"Not a backup file: {filename}", filename)
            return False

        path = self._backup_dir / filename
        if not path.is_file():
            self._fail("delete", f"Backup {filename} not found", filename)
            return False

        try:
            path.unlink()
        except OSError as e:
            self._fail("delete", f"Could not delete backup: {e}", filename)
            return False

        self._audit.log(AuditEventBuilder.backup_deleted(filename))
        return True
