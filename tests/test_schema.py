from __future__ import annotations

from orgtrack.db.create_tables import DEFAULT_ORGANIZATION, DEFAULT_TEAM, init_database


def test_seed_runs_once(storage):
    assert init_database(storage) is True
    assert init_database(storage) is False

    orgs = storage.read_collection("organizations")
    teams = storage.read_collection("teams")
    assert [row["name"] for row in orgs] == [DEFAULT_ORGANIZATION["name"]]
    assert [row["name"] for row in teams] == [DEFAULT_TEAM["name"]]
    assert teams[0]["organization_id"] == orgs[0]["id"]


def test_seed_skipped_when_organizations_exist(storage):
    storage.replace_collection("organizations", [{"id": "o1", "name": "Existente"}])
    assert init_database(storage) is False
    assert storage.read_collection("teams") == []
