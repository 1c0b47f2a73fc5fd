from __future__ import annotations

from datetime import datetime

import pytest

from orgtrack.db.models import COLLECTIONS
from orgtrack.services.errors import SnapshotFormatError
from orgtrack.services.snapshot_service import snapshot_filename


def _collections(snapshot):
    return {name: snapshot[name] for name in COLLECTIONS}


def _snapshot_with_org(org_id, name):
    data = {collection: [] for collection in COLLECTIONS}
    data["organizations"] = [{"id": org_id, "name": name}]
    return data


def _fill(services, org, person):
    team = services.teams.create({"name": "T1", "organizationId": org["id"]})
    services.teams.add_person(team["id"], person["id"])
    services.assets.create(
        {
            "name": "Notebook",
            "type": "notebook",
            "serialNumber": "SN-1",
            "purchaseDate": "2024-01-01",
            "condition": "new",
            "value": 4200.5,
            "assignedTo": person["id"],
            "organizationId": org["id"],
        }
    )
    lic = services.licenses.create(
        {"name": "IDE", "expirationDate": "2030-01-01", "totalQuantity": 2, "organizationId": org["id"]}
    )
    services.licenses.assign_to_user(lic["id"], person["id"])
    services.licenses.update_individual_code(lic["id"], person["id"], "IDE-001")
    services.inventory.create(
        {
            "name": "Cabo",
            "category": "Cabos",
            "quantity": 1,
            "minQuantity": 0,
            "location": "A",
            "organizationId": org["id"],
        }
    )


def test_export_format(services, org):
    snapshot = services.snapshots.export_snapshot()
    assert snapshot["version"] == "1.0.0"
    assert snapshot["exportDate"] == "2024-06-01T12:00:00.000Z"
    assert [row["id"] for row in snapshot["organizations"]] == [org["id"]]


def test_export_import_round_trip(services, org, person):
    _fill(services, org, person)
    exported = services.snapshots.export_snapshot()

    services.snapshots.clear_all_data()
    assert all(rows == [] for rows in _collections(services.snapshots.export_snapshot()).values())

    assert services.snapshots.import_snapshot(exported) is True
    assert _collections(services.snapshots.export_snapshot()) == _collections(exported)

    restored = services.snapshots.export_snapshot()
    assert all(restored[name] for name in COLLECTIONS)
    (asset,) = restored["assets"]
    assert asset["assigned_to"] == person["id"]
    assert asset["status"] == "allocated"
    (lic,) = restored["licenses"]
    assert lic["assigned_to"] == [person["id"]]
    assert lic["individual_codes"] == {person["id"]: "IDE-001"}
    assert restored["people"][0]["team_id"] == restored["teams"][0]["id"]


def test_invalid_snapshot_changes_nothing(services, org):
    before = services.snapshots.export_snapshot()
    bad = _snapshot_with_org("o9", "X")
    bad["people"] = "nobody"

    with pytest.raises(SnapshotFormatError) as excinfo:
        services.snapshots.import_snapshot(bad)
    assert "people" in excinfo.value.message

    with pytest.raises(SnapshotFormatError):
        services.snapshots.import_snapshot({"organizations": []})
    with pytest.raises(SnapshotFormatError):
        services.snapshots.import_snapshot([])

    assert _collections(services.snapshots.export_snapshot()) == _collections(before)
    assert services.snapshots.backup_info()["exists"] is False


def test_restore_swaps_with_backup(services):
    services.snapshots.import_snapshot(_snapshot_with_org("a", "A"))
    services.snapshots.import_snapshot(_snapshot_with_org("b", "B"))

    def names():
        return [row["name"] for row in services.organizations.get_all()]

    assert names() == ["B"]
    assert services.snapshots.restore_backup() is True
    assert names() == ["A"]
    # the restore itself backed up B, so a second restore flips back
    assert services.snapshots.restore_backup() is True
    assert names() == ["B"]


def test_restore_without_backup(services):
    assert services.snapshots.restore_backup() is False


def test_clear_keeps_backup(services, org, person):
    services.snapshots.clear_all_data()
    assert services.organizations.get_all() == []

    info = services.snapshots.backup_info()
    assert info["exists"] is True
    assert info["exportDate"] == "2024-06-01T12:00:00.000Z"

    services.snapshots.restore_backup()
    assert [row["id"] for row in services.organizations.get_all()] == [org["id"]]
    assert services.people.get_by_id(person["id"])["name"] == "P1"


def test_snapshot_filename():
    assert snapshot_filename(datetime(2024, 6, 1)) == "sistema-gestao-backup-2024-06-01.json"
