"""
Translate stored rows (flat, snake_case) into the composed camelCase views
consumed by the UI, and patches coming from the UI back into stored rows.

The field tables below are the single source of truth for renaming: the write
path uses their exact inverse. Derived fields (status, counts, totals) and
joined fields (team name, assignee name, a person's assets/licenses) are added
by the ``compose_*`` helpers on every read and never written back.

Joins are plain scans over the related collection (no secondary index); each
request loads a related collection once and filters it per record.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from orgtrack.domain.statuses import (
    DEFAULT_EXPIRING_DAYS,
    STOCK_LABELS,
    days_until,
    inventory_status,
    license_status,
    reconcile_asset_status,
)

_COMMON = {
    "id": "id",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

FIELD_MAPS: dict[str, dict[str, str]] = {
    "organizations": {
        **_COMMON,
        "name": "name",
        "description": "description",
    },
    "teams": {
        **_COMMON,
        "name": "name",
        "description": "description",
        "organization_id": "organizationId",
        "manager_id": "managerId",
    },
    "people": {
        **_COMMON,
        "name": "name",
        "email": "email",
        "position": "position",
        "status": "status",
        "organization_id": "organizationId",
        "team_id": "teamId",
        "manager_id": "managerId",
        "subordinates": "subordinates",
    },
    "assets": {
        **_COMMON,
        "name": "name",
        "type": "type",
        "serial_number": "serialNumber",
        "status": "status",
        "condition": "condition",
        "value": "value",
        "purchase_date": "purchaseDate",
        "assigned_to": "assignedTo",
        "organization_id": "organizationId",
        "notes": "notes",
    },
    "licenses": {
        **_COMMON,
        "name": "name",
        "description": "description",
        "expiration_date": "expirationDate",
        "total_quantity": "totalQuantity",
        "cost": "cost",
        "vendor": "vendor",
        "organization_id": "organizationId",
        "assigned_to": "assignedTo",
        "license_code": "licenseCode",
        "individual_codes": "individualCodes",
    },
    "inventory": {
        **_COMMON,
        "name": "name",
        "category": "category",
        "quantity": "quantity",
        "min_quantity": "minQuantity",
        "location": "location",
        "organization_id": "organizationId",
        "cost_per_unit": "costPerUnit",
        "supplier": "supplier",
    },
}

COMPOSED_TO_STORED: dict[str, dict[str, str]] = {
    name: {composed: stored for stored, composed in mapping.items()}
    for name, mapping in FIELD_MAPS.items()
}


def _copy(value: Any) -> Any:
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    return value


def row_to_view(collection: str, row: Mapping[str, Any]) -> dict:
    """Rename stored fields to their composed names (no derived fields)."""
    mapping = FIELD_MAPS[collection]
    return {composed: _copy(row.get(stored)) for stored, composed in mapping.items()}


def view_to_row(collection: str, data: Mapping[str, Any], fields: Optional[Iterable[str]] = None) -> dict:
    """
    Rename composed fields back to stored names.

    Only keys present in ``data`` are returned (partial patches stay partial);
    unknown and derived keys are ignored. ``fields`` restricts the accepted
    composed names.
    """
    mapping = COMPOSED_TO_STORED[collection]
    allowed = set(fields) if fields is not None else set(mapping)
    return {
        mapping[key]: _copy(value)
        for key, value in data.items()
        if key in mapping and key in allowed
    }


# -------------------------- composers --------------------------
def compose_organization(row: Mapping[str, Any]) -> dict:
    return row_to_view("organizations", row)


def compose_team(row: Mapping[str, Any], people: Iterable[Mapping[str, Any]]) -> dict:
    view = row_to_view("teams", row)
    view["peopleCount"] = sum(
        1
        for person in people
        if person.get("team_id") == row.get("id") and (person.get("status") or "active") == "active"
    )
    return view


def compose_asset(row: Mapping[str, Any], people_by_id: Mapping[str, Mapping[str, Any]]) -> dict:
    view = row_to_view("assets", row)
    view["value"] = _as_float(row.get("value"))
    # assigned_to may have been nulled by the engine (ON DELETE SET NULL)
    view["status"] = reconcile_asset_status(row.get("status"), row.get("assigned_to"))
    assignee = people_by_id.get(row.get("assigned_to") or "")
    view["assignedToName"] = assignee.get("name") if assignee else None
    return view


def compose_license(
    row: Mapping[str, Any],
    now: datetime,
    threshold_days: int = DEFAULT_EXPIRING_DAYS,
) -> dict:
    view = row_to_view("licenses", row)
    assigned = list(row.get("assigned_to") or [])
    total = int(row.get("total_quantity") or 0)
    view["assignedTo"] = assigned
    view["individualCodes"] = dict(row.get("individual_codes") or {})
    view["totalQuantity"] = total
    view["usedQuantity"] = len(assigned)
    view["availableQuantity"] = max(total - len(assigned), 0)
    view["daysUntilExpiration"] = days_until(row.get("expiration_date"), now)
    view["status"] = license_status(row.get("expiration_date"), now, threshold_days)
    return view


def compose_inventory_item(row: Mapping[str, Any]) -> dict:
    view = row_to_view("inventory", row)
    quantity = int(row.get("quantity") or 0)
    cost = _as_float(row.get("cost_per_unit"))
    status = inventory_status(quantity, row.get("min_quantity"))
    view["quantity"] = quantity
    view["minQuantity"] = int(row.get("min_quantity") or 0)
    view["costPerUnit"] = cost
    view["status"] = status
    view["statusLabel"] = STOCK_LABELS[status]
    view["totalValue"] = round(quantity * cost, 2)
    return view


def compose_person(
    row: Mapping[str, Any],
    *,
    teams_by_id: Mapping[str, Mapping[str, Any]],
    assets: Iterable[Mapping[str, Any]],
    licenses: Iterable[Mapping[str, Any]],
    now: datetime,
    threshold_days: int = DEFAULT_EXPIRING_DAYS,
) -> dict:
    """Person view with its team name and the assets/licenses pointing back at it."""
    person_id = row.get("id")
    view = row_to_view("people", row)
    view["status"] = row.get("status") or "active"
    view["subordinates"] = list(row.get("subordinates") or [])
    team = teams_by_id.get(row.get("team_id") or "")
    view["teamName"] = team.get("name") if team else ""
    view["entryDate"] = row.get("created_at")
    people_by_id = {person_id: row}
    view["assets"] = [
        compose_asset(asset, people_by_id)
        for asset in assets
        if asset.get("assigned_to") == person_id
    ]
    view["licenses"] = [
        compose_license(item, now, threshold_days)
        for item in licenses
        if person_id in (item.get("assigned_to") or [])
    ]
    return view


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
