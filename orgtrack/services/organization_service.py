"""Organizations: the tenancy root, plus the per-organization dashboard summary."""

from __future__ import annotations

from typing import Optional

from orgtrack.core.logging_factory import get_logger
from orgtrack.domain.statuses import (
    LICENSE_ACTIVE,
    LICENSE_EXPIRED,
    LICENSE_EXPIRING_SOON,
    STOCK_LOW,
    STOCK_OUT,
    inventory_status,
    license_status,
    reconcile_asset_status,
)
from orgtrack.services.base import CollectionService, by_name
from orgtrack.services.record_mapper import compose_organization

logger = get_logger(__name__)


def _money(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


class OrganizationService(CollectionService):
    collection = "organizations"
    required_fields = ("name",)
    writable_fields = frozenset({"name", "description"})
    updatable_fields = writable_fields

    def _compose(self, row: dict, context: dict) -> dict:
        return compose_organization(row)

    def _validate(self, row: dict, original: Optional[dict]) -> None:
        return None

    def get_all(self, organization_id: Optional[str] = None) -> list[dict]:
        """All organizations by name (organizations are not tenant-scoped)."""
        return by_name(compose_organization(row) for row in self._rows())

    def delete(self, record_id: str) -> bool:
        # teams/people/assets/licenses/inventory go with it via ON DELETE CASCADE
        deleted = super().delete(record_id)
        if deleted:
            logger.info("organization %s removed with all dependent records", record_id)
        return deleted

    def summary(self, organization_id: str) -> Optional[dict]:
        """Counts and totals shown on the dashboard for one organization."""
        data = self.storage.read_all()
        if not any(row.get("id") == organization_id for row in data["organizations"]):
            return None

        def scoped(name: str) -> list[dict]:
            return [row for row in data[name] if row.get("organization_id") == organization_id]

        people = scoped("people")
        assets = scoped("assets")
        licenses = scoped("licenses")
        inventory = scoped("inventory")
        now = self._now()
        threshold = self.settings.license_expiring_days

        active_people = sum(1 for row in people if (row.get("status") or "active") == "active")
        with_team = sum(1 for row in people if row.get("team_id"))
        asset_status = [reconcile_asset_status(row.get("status"), row.get("assigned_to")) for row in assets]
        license_states = [license_status(row.get("expiration_date"), now, threshold) for row in licenses]
        stock_states = [inventory_status(row.get("quantity"), row.get("min_quantity")) for row in inventory]

        return {
            "organizationId": organization_id,
            "teams": len(scoped("teams")),
            "people": {
                "total": len(people),
                "active": active_people,
                "inactive": len(people) - active_people,
                "withTeam": with_team,
                "withoutTeam": len(people) - with_team,
            },
            "assets": {
                "total": len(assets),
                "available": asset_status.count("available"),
                "allocated": asset_status.count("allocated"),
                "maintenance": asset_status.count("maintenance"),
                "totalValue": round(sum(_money(row.get("value")) for row in assets), 2),
            },
            "licenses": {
                "total": len(licenses),
                "active": license_states.count(LICENSE_ACTIVE),
                "expiringSoon": license_states.count(LICENSE_EXPIRING_SOON),
                "expired": license_states.count(LICENSE_EXPIRED),
                "seatsTotal": sum(int(row.get("total_quantity") or 0) for row in licenses),
                "seatsUsed": sum(len(row.get("assigned_to") or []) for row in licenses),
                "totalCost": round(sum(_money(row.get("cost")) for row in licenses), 2),
            },
            "inventory": {
                "items": len(inventory),
                "lowStock": stock_states.count(STOCK_LOW),
                "outOfStock": stock_states.count(STOCK_OUT),
                "totalUnits": sum(int(row.get("quantity") or 0) for row in inventory),
                "totalValue": round(
                    sum(int(row.get("quantity") or 0) * _money(row.get("cost_per_unit")) for row in inventory),
                    2,
                ),
            },
        }
