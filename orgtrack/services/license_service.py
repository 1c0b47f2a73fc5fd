"""Software licenses: seats, shared code and per-person codes."""

from __future__ import annotations

from typing import Optional

from orgtrack.core.logging_factory import get_logger
from orgtrack.core.utils import now_iso, parse_timestamp
from orgtrack.services.base import CollectionService, by_date_desc, find_index
from orgtrack.services.errors import ValidationError
from orgtrack.services.record_mapper import compose_license

logger = get_logger(__name__)


class LicenseService(CollectionService):
    collection = "licenses"
    required_fields = ("name", "expirationDate", "totalQuantity", "organizationId")
    writable_fields = frozenset(
        {"name", "description", "expirationDate", "totalQuantity", "cost", "vendor", "licenseCode", "organizationId"}
    )
    updatable_fields = writable_fields - {"organizationId"}

    def _compose(self, row: dict, context: dict) -> dict:
        return compose_license(row, self._now(), self.settings.license_expiring_days)

    def _sort(self, views: list[dict]) -> list[dict]:
        return by_date_desc(views, "expirationDate")

    def _prepare(self, row: dict, original: Optional[dict]) -> None:
        if row.get("assigned_to") is None:
            row["assigned_to"] = []
        if row.get("individual_codes") is None:
            row["individual_codes"] = {}

    def _validate(self, row: dict, original: Optional[dict]) -> None:
        super()._validate(row, original)
        if parse_timestamp(row.get("expiration_date")) is None:
            raise ValidationError("Data de expiracao invalida")
        self._check_non_negative(row, "total_quantity", "Quantidade total", integer=True)
        self._check_non_negative(row, "cost", "Custo")
        if (row.get("total_quantity") or 0) < len(row["assigned_to"]):
            raise ValidationError("Quantidade total menor que o numero de pessoas atribuidas")

    def _locate(self, license_id: str) -> tuple[list[dict], Optional[dict]]:
        rows = self._rows()
        index = find_index(rows, license_id)
        return rows, (rows[index] if index >= 0 else None)

    def assign_to_user(self, license_id: str, person_id: str) -> bool:
        """
        Add the person to assignedTo. Already assigned, unknown person, unknown
        license or no free seat -> False with the collection left untouched.
        """
        rows, item = self._locate(license_id)
        if item is None:
            return False
        assigned = list(item.get("assigned_to") or [])
        if person_id in assigned or len(assigned) >= int(item.get("total_quantity") or 0):
            return False
        person = self._find(person_id, "people")
        if person is None or person.get("organization_id") != item.get("organization_id"):
            return False
        assigned.append(person_id)
        item["assigned_to"] = assigned
        item["updated_at"] = now_iso(self._now())
        self._save(rows)
        logger.info("license %s assigned to %s (%d/%s)", license_id, person_id, len(assigned), item.get("total_quantity"))
        return True

    def unassign_from_user(self, license_id: str, person_id: str) -> bool:
        """Remove the person from assignedTo and drop their individual code."""
        rows, item = self._locate(license_id)
        if item is None:
            return False
        assigned = list(item.get("assigned_to") or [])
        codes = dict(item.get("individual_codes") or {})
        if person_id not in assigned and person_id not in codes:
            return False
        item["assigned_to"] = [value for value in assigned if value != person_id]
        codes.pop(person_id, None)
        item["individual_codes"] = codes
        item["updated_at"] = now_iso(self._now())
        self._save(rows)
        logger.info("license %s unassigned from %s", license_id, person_id)
        return True

    def update_license_code(self, license_id: str, license_code: Optional[str]) -> bool:
        rows, item = self._locate(license_id)
        if item is None:
            return False
        item["license_code"] = (license_code or "").strip() or None
        item["updated_at"] = now_iso(self._now())
        self._save(rows)
        return True

    def update_individual_code(self, license_id: str, person_id: str, code: Optional[str]) -> bool:
        """Store the stripped code for the person; a blank code removes the entry."""
        rows, item = self._locate(license_id)
        if item is None:
            return False
        codes = dict(item.get("individual_codes") or {})
        value = (code or "").strip()
        if value:
            codes[person_id] = value
        else:
            codes.pop(person_id, None)
        item["individual_codes"] = codes
        item["updated_at"] = now_iso(self._now())
        self._save(rows)
        return True
