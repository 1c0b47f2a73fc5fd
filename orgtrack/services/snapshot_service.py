"""
Import/export/backup of the whole database as one portable JSON snapshot.

A snapshot holds the six collections as stored rows plus ``exportDate`` and
``version``. Importing or clearing first copies the current state into the
single backup slot (older backups are overwritten), in the same transaction as
the replacement.

Restoring the backup is an import of the backup content, so it overwrites the
slot with the pre-restore state: restoring twice in a row brings back the
state that was current before the first restore.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from orgtrack.core.logging_factory import get_logger
from orgtrack.core.utils import now_iso, utcnow
from orgtrack.db.models import COLLECTIONS
from orgtrack.repositories.sql_storage import SQLStorage
from orgtrack.services.errors import SnapshotFormatError

logger = get_logger(__name__)

SNAPSHOT_VERSION = "1.0.0"


def snapshot_filename(now: Optional[datetime] = None) -> str:
    return f"sistema-gestao-backup-{(now or utcnow()).date().isoformat()}.json"


def validate_snapshot(data: Any) -> None:
    if not isinstance(data, Mapping):
        raise SnapshotFormatError("Formato invalido: o snapshot deve ser um objeto")
    for name in COLLECTIONS:
        rows = data.get(name)
        if not isinstance(rows, list):
            raise SnapshotFormatError(f"Formato invalido: {name} deve ser uma lista")
        if not all(isinstance(row, Mapping) for row in rows):
            raise SnapshotFormatError(f"Formato invalido: {name} deve conter apenas objetos")


class SnapshotService:
    def __init__(self, storage: SQLStorage, clock: Callable[[], datetime] = utcnow) -> None:
        self.storage = storage
        self._clock = clock

    def export_snapshot(self) -> dict:
        snapshot: dict[str, Any] = dict(self.storage.read_all())
        snapshot["exportDate"] = now_iso(self._clock())
        snapshot["version"] = SNAPSHOT_VERSION
        return snapshot

    def export_filename(self) -> str:
        return snapshot_filename(self._clock())

    def import_snapshot(self, data: Any) -> bool:
        """
        Back up the current state, then replace all six collections.

        Raises SnapshotFormatError (nothing written) when a collection is
        missing or not a list of objects.
        """
        validate_snapshot(data)
        current = self.export_snapshot()
        self.storage.replace_all({name: data[name] for name in COLLECTIONS}, backup=current)
        logger.info(
            "snapshot imported (exportDate=%s, version=%s)",
            data.get("exportDate"),
            data.get("version"),
        )
        return True

    def restore_backup(self) -> bool:
        """Import the backup slot; False when no backup exists."""
        backup = self.storage.read_backup()
        if backup is None:
            logger.warning("restore requested but no backup was found")
            return False
        return self.import_snapshot(backup["payload"])

    def clear_all_data(self) -> None:
        current = self.export_snapshot()
        self.storage.replace_all({name: [] for name in COLLECTIONS}, backup=current)
        logger.info("all collections cleared (backup kept)")

    def backup_info(self) -> dict:
        backup = self.storage.read_backup()
        if backup is None:
            return {"exists": False, "createdAt": None, "exportDate": None}
        payload = backup.get("payload") or {}
        return {
            "exists": True,
            "createdAt": backup.get("created_at"),
            "exportDate": payload.get("exportDate"),
        }
