"""
Shared CRUD flow for the entity services.

Every mutation is read-modify-write of the whole owning collection: read the
full list, change it in memory, write the full list back. Two concurrent
writers on the same collection race and the last one wins; callers get no
conflict detection.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional

from orgtrack.core.config import Settings, get_settings
from orgtrack.core.logging_factory import get_logger
from orgtrack.core.utils import new_id, now_iso, parse_timestamp, utcnow
from orgtrack.repositories.sql_storage import SQLStorage
from orgtrack.services.errors import ValidationError
from orgtrack.services.record_mapper import FIELD_MAPS, view_to_row

logger = get_logger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def by_name(views: Iterable[dict]) -> list[dict]:
    return sorted(views, key=lambda view: (view.get("name") or "").casefold())


def by_date_desc(views: Iterable[dict], field: str) -> list[dict]:
    return sorted(views, key=lambda view: parse_timestamp(view.get(field)) or _OLDEST, reverse=True)


def find_index(rows: list[dict], record_id: str) -> int:
    for index, row in enumerate(rows):
        if row.get("id") == record_id:
            return index
    return -1


class CollectionService:
    """getAll/getById/create/update/delete over one collection."""

    collection = ""
    required_fields: tuple[str, ...] = ("name", "organizationId")
    writable_fields: frozenset[str] = frozenset()
    updatable_fields: frozenset[str] = frozenset()

    def __init__(
        self,
        storage: SQLStorage,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.storage = storage
        self.settings = settings or get_settings()
        self._clock = clock

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> datetime:
        return self._clock()

    def _rows(self, name: Optional[str] = None) -> list[dict]:
        return self.storage.read_collection(name or self.collection)

    def _save(self, rows: list[dict], name: Optional[str] = None) -> None:
        self.storage.replace_collection(name or self.collection, rows)

    def _find(self, record_id: str, name: Optional[str] = None) -> Optional[dict]:
        rows = self._rows(name)
        index = find_index(rows, record_id)
        return rows[index] if index >= 0 else None

    def _require_organization(self, organization_id: Any) -> None:
        if not organization_id or self._find(organization_id, "organizations") is None:
            raise ValidationError("Organizacao nao encontrada", "organization_not_found")

    @staticmethod
    def _check_choice(row: dict, key: str, allowed: set[str], label: str) -> None:
        value = row.get(key)
        if value is not None and value not in allowed:
            options = ", ".join(sorted(allowed))
            raise ValidationError(f"{label} invalido: use um de {options}")

    @staticmethod
    def _check_non_negative(row: dict, key: str, label: str, *, integer: bool = False) -> None:
        value = row.get(key)
        if value is None:
            return
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{label} deve ser numerico")
        if integer and int(value) != value:
            raise ValidationError(f"{label} deve ser inteiro")
        if value < 0:
            raise ValidationError(f"{label} nao pode ser negativo")
        if integer:
            row[key] = int(value)

    # -------------------------------------- hooks --------------------------------------
    def _load_context(self) -> dict:
        """Related collections needed to compose views, loaded once per call."""
        return {}

    def _compose(self, row: dict, context: dict) -> dict:
        raise NotImplementedError

    def _sort(self, views: list[dict]) -> list[dict]:
        return by_name(views)

    def _prepare(self, row: dict, original: Optional[dict]) -> None:
        """Normalize a row before validation (defaults, derived consistency)."""

    def _validate(self, row: dict, original: Optional[dict]) -> None:
        if original is None:
            self._require_organization(row.get("organization_id"))

    # -------------------------------------- CRUD --------------------------------------
    def get_all(self, organization_id: str) -> list[dict]:
        rows = [row for row in self._rows() if row.get("organization_id") == organization_id]
        context = self._load_context()
        return self._sort([self._compose(row, context) for row in rows])

    def get_by_id(self, record_id: str) -> Optional[dict]:
        row = self._find(record_id)
        if row is None:
            return None
        return self._compose(row, self._load_context())

    def create(self, data: Mapping[str, Any]) -> dict:
        if not isinstance(data, Mapping):
            raise ValidationError("Dados invalidos: esperado um objeto")
        missing = [field for field in self.required_fields if _blank(data.get(field))]
        if missing:
            raise ValidationError(f"Campos obrigatorios ausentes: {', '.join(missing)}")
        row: dict[str, Any] = {stored: None for stored in FIELD_MAPS[self.collection]}
        row.update(view_to_row(self.collection, data, self.writable_fields))
        now = now_iso(self._now())
        row.update(id=new_id(), created_at=now, updated_at=now)
        self._prepare(row, None)
        self._validate(row, None)

        rows = self._rows()
        rows.append(row)
        self._save(rows)
        logger.info("%s %s created", self.collection, row["id"])
        return self._compose(row, self._load_context())

    def update(self, record_id: str, patch: Mapping[str, Any]) -> Optional[dict]:
        if not isinstance(patch, Mapping):
            raise ValidationError("Dados invalidos: esperado um objeto")
        rows = self._rows()
        index = find_index(rows, record_id)
        if index < 0:
            return None
        original = rows[index]
        row = dict(original)
        changes = view_to_row(self.collection, patch, self.updatable_fields)
        if "name" in changes and _blank(changes["name"]):
            raise ValidationError("Nome nao pode ser vazio")
        row.update(changes)
        self._prepare(row, original)
        self._validate(row, original)
        row["updated_at"] = now_iso(self._now())

        rows[index] = row
        self._save(rows)
        logger.info("%s %s updated", self.collection, record_id)
        return self._compose(row, self._load_context())

    def delete(self, record_id: str) -> bool:
        rows = self._rows()
        remaining = [row for row in rows if row.get("id") != record_id]
        if len(remaining) == len(rows):
            return False
        self._save(remaining)
        logger.info("%s %s deleted", self.collection, record_id)
        return True
