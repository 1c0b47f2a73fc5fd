"""
Collection-level storage against a temporary SQLite database.
"""
from __future__ import annotations

import pytest

from orgtrack.repositories.sql_storage import StorageError, UnknownCollectionError


def _org(org_id="o1", name="O1"):
    return {"id": org_id, "name": name}


def _person(person_id="p1", org_id="o1", team_id=None, **extra):
    row = {"id": person_id, "name": person_id.upper(), "organization_id": org_id, "team_id": team_id}
    row.update(extra)
    return row


def test_empty_collections_read_as_empty_lists(storage):
    data = storage.read_all()
    assert set(data) == {"organizations", "teams", "people", "assets", "licenses", "inventory"}
    assert all(rows == [] for rows in data.values())
    assert storage.read_backup() is None


def test_replace_and_read_fill_defaults(storage):
    storage.replace_collection("organizations", [_org()])
    storage.replace_collection("people", [_person()])

    (person,) = storage.read_collection("people")
    assert person["organization_id"] == "o1"
    assert person["subordinates"] == []
    assert person["status"] == "active"
    assert person["created_at"] and person["updated_at"]
    assert storage.count("people") == 1


def test_replace_keeps_rows_present_in_new_list(storage):
    storage.replace_all({"organizations": [_org()], "people": [_person("p1"), _person("p2")]})
    storage.replace_collection("people", [_person("p2", position="Lead")])

    rows = storage.read_collection("people")
    assert [row["id"] for row in rows] == ["p2"]
    assert rows[0]["position"] == "Lead"


def test_organization_removal_cascades(storage):
    storage.replace_all(
        {
            "organizations": [_org()],
            "teams": [{"id": "t1", "name": "T1", "organization_id": "o1"}],
            "people": [_person(team_id="t1")],
            "assets": [{"id": "a1", "name": "A1", "organization_id": "o1", "assigned_to": "p1"}],
        }
    )
    storage.replace_collection("organizations", [])

    data = storage.read_all()
    assert data["teams"] == [] and data["people"] == [] and data["assets"] == []


def test_team_removal_nulls_person_team(storage):
    storage.replace_all(
        {
            "organizations": [_org()],
            "teams": [{"id": "t1", "name": "T1", "organization_id": "o1"}],
            "people": [_person(team_id="t1")],
        }
    )
    storage.replace_collection("teams", [])
    assert storage.read_collection("people")[0]["team_id"] is None


def test_failed_replace_rolls_back_every_collection(storage):
    storage.replace_collection("organizations", [_org()])
    with pytest.raises(StorageError):
        storage.replace_all(
            {
                "organizations": [_org(), _org("o2", "O2")],
                "teams": [{"id": "t1", "name": "T1", "organization_id": "missing"}],
            }
        )
    assert [row["id"] for row in storage.read_collection("organizations")] == ["o1"]
    assert storage.read_collection("teams") == []


def test_invalid_records_are_rejected_before_writing(storage):
    with pytest.raises(StorageError):
        storage.replace_collection("organizations", [{"name": "no id"}])
    with pytest.raises(StorageError):
        storage.replace_collection("organizations", [_org(), _org()])
    with pytest.raises(StorageError):
        storage.replace_collection("organizations", {"id": "o1"})
    assert storage.read_collection("organizations") == []


def test_unknown_collection(storage):
    with pytest.raises(UnknownCollectionError):
        storage.read_collection("cards")
    with pytest.raises(UnknownCollectionError):
        storage.replace_collection("cards", [])


def test_json_fields_accept_serialized_text(storage):
    storage.replace_all(
        {
            "organizations": [_org()],
            "licenses": [
                {
                    "id": "l1",
                    "name": "IDE",
                    "organization_id": "o1",
                    "assigned_to": '["p1"]',
                    "individual_codes": '{"p1": "X"}',
                }
            ],
        }
    )
    (item,) = storage.read_collection("licenses")
    assert item["assigned_to"] == ["p1"]
    assert item["individual_codes"] == {"p1": "X"}


def test_backup_slot_is_overwritten(storage):
    storage.replace_all({}, backup={"version": "a"})
    storage.replace_all({}, backup={"version": "b"})
    backup = storage.read_backup()
    assert backup["payload"] == {"version": "b"}
    assert backup["created_at"]
