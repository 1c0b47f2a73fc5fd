from __future__ import annotations

import pytest

from orgtrack.services.errors import ValidationError


def _asset(org, **extra):
    data = {
        "name": "A1",
        "type": "notebook",
        "serialNumber": "SN-1",
        "purchaseDate": "2024-01-15",
        "condition": "good",
        "value": 4500,
        "organizationId": org["id"],
    }
    data.update(extra)
    return data


def test_assigned_asset_is_composed_with_person(services, org, person):
    created = services.assets.create(_asset(org, assignedTo=person["id"]))

    (view,) = services.assets.get_all(org["id"])
    assert view["id"] == created["id"]
    assert view["status"] == "allocated"
    assert view["assignedTo"] == person["id"]
    assert view["assignedToName"] == "P1"
    assert [asset["id"] for asset in services.people.get_by_id(person["id"])["assets"]] == [created["id"]]


def test_status_follows_assignment(services, org, person):
    asset = services.assets.create(_asset(org, status="allocated"))
    assert asset["status"] == "available"
    assert asset["assignedTo"] is None

    assert services.assets.assign_to_user(asset["id"], person["id"]) is True
    assert services.assets.get_by_id(asset["id"])["status"] == "allocated"
    assert services.assets.get_available(org["id"]) == []

    assert services.assets.unassign_from_user(asset["id"]) is True
    view = services.assets.get_by_id(asset["id"])
    assert view["status"] == "available"
    assert view["assignedTo"] is None


def test_update_reconciles_status(services, org, person):
    asset = services.assets.create(_asset(org, assignedTo=person["id"]))
    updated = services.assets.update(asset["id"], {"status": "maintenance"})
    assert updated["status"] == "allocated"

    updated = services.assets.update(asset["id"], {"assignedTo": None})
    assert updated["status"] == "available"

    updated = services.assets.update(asset["id"], {"status": "maintenance"})
    assert updated["status"] == "maintenance"


def test_assign_to_missing_person_is_a_no_op(services, org):
    asset = services.assets.create(_asset(org))
    assert services.assets.assign_to_user(asset["id"], "ghost") is False
    assert services.assets.assign_to_user("missing", "ghost") is False
    assert services.assets.get_by_id(asset["id"])["status"] == "available"


def test_assets_sorted_by_purchase_date_desc(services, org):
    services.assets.create(_asset(org, name="Old", purchaseDate="2022-01-01"))
    services.assets.create(_asset(org, name="New", purchaseDate="2024-03-01"))
    assert [asset["name"] for asset in services.assets.get_all(org["id"])] == ["New", "Old"]


def test_create_rejects_invalid_input(services, org):
    with pytest.raises(ValidationError):
        services.assets.create(_asset(org, type="phone"))
    with pytest.raises(ValidationError):
        services.assets.create(_asset(org, value=-1))
    with pytest.raises(ValidationError):
        services.assets.create(_asset(org, serialNumber=""))
    with pytest.raises(ValidationError):
        services.assets.create(_asset(org, assignedTo="ghost"))
    assert services.assets.get_all(org["id"]) == []


def test_person_removed_through_raw_write_frees_asset(services, storage, org, person):
    asset = services.assets.create(_asset(org, assignedTo=person["id"]))

    storage.replace_collection("people", [])

    view = services.assets.get_by_id(asset["id"])
    assert view["assignedTo"] is None
    assert view["status"] == "available"
    assert view["assignedToName"] is None
    assert [a["id"] for a in services.assets.get_available(org["id"])] == [asset["id"]]
