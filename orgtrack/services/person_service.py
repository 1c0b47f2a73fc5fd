"""People, composed with their team name and assigned assets/licenses."""

from __future__ import annotations

from typing import Optional

from orgtrack.core.logging_factory import get_logger
from orgtrack.core.utils import now_iso
from orgtrack.domain.statuses import PERSON_STATUSES
from orgtrack.services.base import CollectionService
from orgtrack.services.errors import ValidationError
from orgtrack.services.record_mapper import compose_person

logger = get_logger(__name__)


class PersonService(CollectionService):
    collection = "people"
    required_fields = ("name", "email", "position", "organizationId")
    writable_fields = frozenset(
        {"name", "email", "position", "status", "organizationId", "teamId", "managerId", "subordinates"}
    )
    updatable_fields = frozenset({"name", "email", "position", "status", "teamId", "managerId", "subordinates"})

    def _load_context(self) -> dict:
        return {
            "teams_by_id": {row["id"]: row for row in self._rows("teams")},
            "assets": self._rows("assets"),
            "licenses": self._rows("licenses"),
        }

    def _compose(self, row: dict, context: dict) -> dict:
        return compose_person(
            row,
            teams_by_id=context["teams_by_id"],
            assets=context["assets"],
            licenses=context["licenses"],
            now=self._now(),
            threshold_days=self.settings.license_expiring_days,
        )

    def _prepare(self, row: dict, original: Optional[dict]) -> None:
        row["status"] = row.get("status") or "active"
        row["team_id"] = row.get("team_id") or None
        row["manager_id"] = row.get("manager_id") or None
        if row.get("subordinates") is None:
            row["subordinates"] = []

    def _validate(self, row: dict, original: Optional[dict]) -> None:
        super()._validate(row, original)
        self._check_choice(row, "status", PERSON_STATUSES, "Status")
        if "@" not in (row.get("email") or ""):
            raise ValidationError("Email invalido")
        subordinates = row.get("subordinates")
        if not isinstance(subordinates, list) or not all(isinstance(item, str) for item in subordinates):
            raise ValidationError("subordinates deve ser uma lista de ids")
        team_id = row.get("team_id")
        if team_id and (original is None or team_id != original.get("team_id")):
            team = self._find(team_id, "teams")
            if team is None or team.get("organization_id") != row.get("organization_id"):
                raise ValidationError("Time nao encontrado", "team_not_found")

    def delete(self, record_id: str) -> bool:
        """Release the person's assets and license seats, then remove the person."""
        if self._find(record_id) is None:
            return False
        now = now_iso(self._now())

        assets = self._rows("assets")
        released = 0
        for asset in assets:
            if asset.get("assigned_to") == record_id:
                asset["assigned_to"] = None
                asset["status"] = "available"
                asset["updated_at"] = now
                released += 1
        if released:
            self._save(assets, "assets")

        licenses = self._rows("licenses")
        seats = 0
        for item in licenses:
            assigned = item.get("assigned_to") or []
            codes = item.get("individual_codes") or {}
            if record_id in assigned or record_id in codes:
                item["assigned_to"] = [person for person in assigned if person != record_id]
                item["individual_codes"] = {k: v for k, v in codes.items() if k != record_id}
                item["updated_at"] = now
                seats += 1
        if seats:
            self._save(licenses, "licenses")

        if released or seats:
            logger.info("person %s: released %d asset(s), %d license seat(s)", record_id, released, seats)
        return super().delete(record_id)
