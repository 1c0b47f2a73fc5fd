"""Physical assets and their allocation to people."""

from __future__ import annotations

from typing import Optional

from orgtrack.core.logging_factory import get_logger
from orgtrack.core.utils import now_iso, parse_timestamp
from orgtrack.domain.statuses import (
    ASSET_CONDITIONS,
    ASSET_STATUSES,
    ASSET_TYPES,
    reconcile_asset_status,
)
from orgtrack.services.base import CollectionService, by_date_desc, find_index
from orgtrack.services.errors import ValidationError
from orgtrack.services.record_mapper import compose_asset

logger = get_logger(__name__)


class AssetService(CollectionService):
    """
    Keeps ``status == "allocated"`` exactly when ``assignedTo`` is set: every
    write path (create, update, assign, unassign) reconciles the two fields.
    """

    collection = "assets"
    required_fields = ("name", "type", "serialNumber", "purchaseDate", "condition", "organizationId")
    writable_fields = frozenset(
        {
            "name",
            "type",
            "serialNumber",
            "value",
            "purchaseDate",
            "status",
            "condition",
            "notes",
            "assignedTo",
            "organizationId",
        }
    )
    updatable_fields = writable_fields - {"organizationId"}

    def _load_context(self) -> dict:
        return {"people_by_id": {row["id"]: row for row in self._rows("people")}}

    def _compose(self, row: dict, context: dict) -> dict:
        return compose_asset(row, context["people_by_id"])

    def _sort(self, views: list[dict]) -> list[dict]:
        return by_date_desc(views, "purchaseDate")

    def _prepare(self, row: dict, original: Optional[dict]) -> None:
        row["assigned_to"] = row.get("assigned_to") or None
        if row.get("value") is None:
            row["value"] = 0.0
        if row.get("status") is None or row.get("status") in ASSET_STATUSES:
            row["status"] = reconcile_asset_status(row.get("status"), row["assigned_to"])

    def _validate(self, row: dict, original: Optional[dict]) -> None:
        super()._validate(row, original)
        self._check_choice(row, "type", ASSET_TYPES, "Tipo")
        self._check_choice(row, "status", ASSET_STATUSES, "Status")
        self._check_choice(row, "condition", ASSET_CONDITIONS, "Condicao")
        self._check_non_negative(row, "value", "Valor")
        if parse_timestamp(row.get("purchase_date")) is None:
            raise ValidationError("Data de compra invalida")
        assignee = row.get("assigned_to")
        if assignee and (original is None or assignee != original.get("assigned_to")):
            person = self._find(assignee, "people")
            if person is None or person.get("organization_id") != row.get("organization_id"):
                raise ValidationError("Pessoa nao encontrada", "person_not_found")

    def get_available(self, organization_id: str) -> list[dict]:
        return [asset for asset in self.get_all(organization_id) if asset["status"] == "available"]

    def assign_to_user(self, asset_id: str, person_id: str) -> bool:
        """Set assignedTo and status=allocated. Unknown asset or person -> False."""
        assets = self._rows()
        index = find_index(assets, asset_id)
        if index < 0:
            return False
        person = self._find(person_id, "people")
        if person is None or person.get("organization_id") != assets[index].get("organization_id"):
            return False
        asset = assets[index]
        asset["assigned_to"] = person_id
        asset["status"] = "allocated"
        asset["updated_at"] = now_iso(self._now())
        self._save(assets)
        logger.info("asset %s assigned to %s", asset_id, person_id)
        return True

    def unassign_from_user(self, asset_id: str) -> bool:
        """Clear assignedTo and reset status=available."""
        assets = self._rows()
        index = find_index(assets, asset_id)
        if index < 0:
            return False
        asset = assets[index]
        asset["assigned_to"] = None
        asset["status"] = "available"
        asset["updated_at"] = now_iso(self._now())
        self._save(assets)
        logger.info("asset %s unassigned", asset_id)
        return True
