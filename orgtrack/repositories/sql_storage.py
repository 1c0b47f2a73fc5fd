"""Collection-level data access backed by SQLAlchemy.

Every collection is read and written as a whole list of flat (snake_case) rows.
``replace_collection`` runs inside one transaction: rows missing from the new
list are deleted (letting ON DELETE CASCADE / SET NULL fire), existing rows are
updated and new rows inserted. A failure rolls everything back.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import delete, func, insert, inspect, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from orgtrack.core.logging_factory import get_logger
from orgtrack.core.utils import now_iso
from orgtrack.db.create_tables import ensure_schema as create_schema
from orgtrack.db.models import COLLECTION_MODELS, COLLECTIONS, JSON_DEFAULTS, SnapshotBackup
from orgtrack.db.session import make_sessionmaker, session_scope

logger = get_logger(__name__)

BACKUP_SLOT = 1


class StorageError(Exception):
    """Raised when the database cannot be read/written or rejects a record."""


class UnknownCollectionError(StorageError):
    def __init__(self, name: str):
        super().__init__(f"Unknown collection: {name}")
        self.name = name


def _decode_json_field(name: str, key: str, value: Any, factory: type) -> Any:
    if value is None or value == "":
        return factory()
    if isinstance(value, str):
        # snapshots antigos guardam listas/objetos serializados como texto
        try:
            value = json.loads(value)
        except ValueError as exc:
            raise StorageError(f"{name}.{key}: invalid JSON value") from exc
    if not isinstance(value, factory):
        raise StorageError(f"{name}.{key}: expected {factory.__name__}")
    return value


class SQLStorage:
    """Storage handle for the six named collections and the backup slot."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sessions = make_sessionmaker(engine)

    # -------------------------- schema --------------------------
    def ensure_schema(self) -> None:
        try:
            create_schema(self.engine)
        except SQLAlchemyError as exc:
            logger.error("Error initializing database: %s", exc)
            raise StorageError("Failed to initialize database") from exc

    def dispose(self) -> None:
        self.engine.dispose()

    # -------------------------- helpers --------------------------
    def _table(self, name: str):
        model = COLLECTION_MODELS.get(name)
        if model is None:
            raise UnknownCollectionError(name)
        return model.__table__

    def _from_db(self, name: str, row: Mapping[str, Any]) -> dict:
        record = dict(row)
        for (collection, key), factory in JSON_DEFAULTS.items():
            if collection == name and record.get(key) is None:
                record[key] = factory()
        return record

    def _to_db(self, name: str, record: Mapping[str, Any], now: str) -> dict:
        table = self._table(name)
        row: dict[str, Any] = {}
        for column in table.columns:
            key = column.name
            value = record.get(key)
            factory = JSON_DEFAULTS.get((name, key))
            if factory is not None:
                value = _decode_json_field(name, key, value, factory)
            elif value is None and column.default is not None and column.default.is_scalar:
                value = column.default.arg
            row[key] = value
        for key in ("created_at", "updated_at"):
            if not row.get(key):
                row[key] = now
        dropped = set(record) - set(row)
        if dropped:
            logger.debug("Ignoring unknown fields for %s: %s", name, ", ".join(sorted(dropped)))
        return row

    def _prepare(self, name: str, records: Iterable[Mapping[str, Any]]) -> list[dict]:
        if not isinstance(records, (list, tuple)):
            raise StorageError(f"{name} must be a list of records")
        now = now_iso()
        prepared: list[dict] = []
        seen: set[str] = set()
        for record in records:
            if not isinstance(record, Mapping):
                raise StorageError(f"{name}: every record must be an object")
            record_id = record.get("id")
            if not isinstance(record_id, str) or not record_id:
                raise StorageError(f"{name}: record without a string id")
            if record_id in seen:
                raise StorageError(f"{name}: duplicated id {record_id}")
            seen.add(record_id)
            prepared.append(self._to_db(name, record, now))
        return prepared

    def _sync(self, session, name: str, rows: list[dict]) -> None:
        table = self._table(name)
        existing = set(session.execute(select(table.c.id)).scalars())
        keep = {row["id"] for row in rows}
        stale = existing - keep
        if stale:
            session.execute(delete(table).where(table.c.id.in_(stale)))
        for row in rows:
            if row["id"] in existing:
                session.execute(update(table).where(table.c.id == row["id"]).values(**row))
            else:
                session.execute(insert(table).values(**row))

    # -------------------------- collections --------------------------
    def read_collection(self, name: str) -> list[dict]:
        table = self._table(name)
        try:
            with self.engine.connect() as conn:
                if not inspect(conn).has_table(table.name):
                    return []
                rows = conn.execute(select(table)).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("Error reading %s: %s", name, exc)
            raise StorageError(f"Failed to read {name}") from exc
        return [self._from_db(name, row) for row in rows]

    def read_all(self) -> dict[str, list[dict]]:
        result: dict[str, list[dict]] = {}
        try:
            with self.engine.connect() as conn:
                inspector = inspect(conn)
                for name in COLLECTIONS:
                    table = self._table(name)
                    if not inspector.has_table(table.name):
                        result[name] = []
                        continue
                    rows = conn.execute(select(table)).mappings().all()
                    result[name] = [self._from_db(name, row) for row in rows]
        except SQLAlchemyError as exc:
            logger.error("Error reading database: %s", exc)
            raise StorageError("Failed to read database") from exc
        return result

    def replace_collection(self, name: str, records: Iterable[Mapping[str, Any]]) -> None:
        self.replace_all({name: records})

    def replace_all(
        self,
        collections: Mapping[str, Iterable[Mapping[str, Any]]],
        *,
        backup: Optional[dict] = None,
    ) -> None:
        """Replace the given collections (parents first) and optionally the backup slot, atomically."""
        for name in collections:
            self._table(name)
        prepared = {
            name: self._prepare(name, collections[name])
            for name in COLLECTIONS
            if name in collections
        }
        try:
            with session_scope(self._sessions) as session:
                if backup is not None:
                    backups = SnapshotBackup.__table__
                    session.execute(delete(backups))
                    session.execute(
                        insert(backups).values(slot=BACKUP_SLOT, created_at=now_iso(), payload=backup)
                    )
                for name, rows in prepared.items():
                    self._sync(session, name, rows)
        except SQLAlchemyError as exc:
            logger.error("Error saving %s: %s", ", ".join(prepared) or "backup", exc)
            raise StorageError(f"Failed to save {', '.join(prepared) or 'backup'}") from exc
        for name, rows in prepared.items():
            logger.info("%s updated successfully (%d records)", name, len(rows))

    def count(self, name: str) -> int:
        table = self._table(name)
        try:
            with self.engine.connect() as conn:
                if not inspect(conn).has_table(table.name):
                    return 0
                return int(conn.execute(select(func.count()).select_from(table)).scalar_one())
        except SQLAlchemyError as exc:
            logger.error("Error counting %s: %s", name, exc)
            raise StorageError(f"Failed to read {name}") from exc

    # -------------------------- backup slot --------------------------
    def read_backup(self) -> Optional[dict]:
        """Return {"created_at", "payload"} of the backup slot, or None when empty."""
        backups = SnapshotBackup.__table__
        try:
            with self.engine.connect() as conn:
                if not inspect(conn).has_table(backups.name):
                    return None
                row = conn.execute(select(backups).where(backups.c.slot == BACKUP_SLOT)).mappings().first()
        except SQLAlchemyError as exc:
            logger.error("Error reading backup: %s", exc)
            raise StorageError("Failed to read backup") from exc
        if row is None:
            return None
        return {"created_at": row["created_at"], "payload": row["payload"]}
