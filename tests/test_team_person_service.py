from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import NOW
from orgtrack.core.utils import now_iso
from orgtrack.services.errors import ValidationError


def _person(services, org, name, **extra):
    data = {"name": name, "email": f"{name.lower()}@example.com", "position": "Dev", "organizationId": org["id"]}
    data.update(extra)
    return services.people.create(data)


def test_team_delete_detaches_members(services, org):
    team = services.teams.create({"name": "T1", "organizationId": org["id"]})
    member = _person(services, org, "Ana", teamId=team["id"])
    assert member["teamName"] == "T1"

    assert services.teams.delete(team["id"]) is True
    view = services.people.get_by_id(member["id"])
    assert view["teamId"] is None
    assert view["teamName"] == ""
    assert services.teams.delete(team["id"]) is False


def test_team_members_and_people_count(services, org):
    team = services.teams.create({"name": "T1", "organizationId": org["id"]})
    _person(services, org, "bruno", teamId=team["id"])
    _person(services, org, "Ana", teamId=team["id"])
    _person(services, org, "Caio", teamId=team["id"], status="inactive")
    _person(services, org, "Duda")

    assert [p["name"] for p in services.teams.get_team_members(team["id"])] == ["Ana", "bruno"]
    assert services.teams.get_by_id(team["id"])["peopleCount"] == 2
    assert services.teams.get_team_members("missing") == []


def test_add_and_remove_person(services, org, person):
    team = services.teams.create({"name": "T1", "organizationId": org["id"]})
    assert services.teams.add_person(team["id"], person["id"]) is True
    assert services.people.get_by_id(person["id"])["teamId"] == team["id"]

    assert services.teams.remove_person(person["id"], "other-team") is False
    assert services.teams.remove_person(person["id"], team["id"]) is True
    assert services.people.get_by_id(person["id"])["teamId"] is None


def test_person_team_must_exist_in_same_org(services, org):
    other = services.organizations.create({"name": "O2"})
    foreign = services.teams.create({"name": "T2", "organizationId": other["id"]})
    with pytest.raises(ValidationError):
        _person(services, org, "Ana", teamId=foreign["id"])
    with pytest.raises(ValidationError):
        _person(services, org, "Bia", teamId="missing")
    assert services.people.get_all(org["id"]) == []


def test_person_validation(services, org):
    with pytest.raises(ValidationError):
        _person(services, org, "Ana", email="sem-arroba")
    with pytest.raises(ValidationError):
        _person(services, org, "Ana", status="away")
    with pytest.raises(ValidationError):
        services.people.create({"name": "Ana", "organizationId": org["id"]})


def test_person_view_fields(services, org, person):
    assert person["status"] == "active"
    assert person["subordinates"] == []
    assert person["entryDate"] == person["createdAt"]
    assert person["assets"] == [] and person["licenses"] == []


def test_person_delete_releases_assets_and_seats(services, org, person):
    asset = services.assets.create(
        {
            "name": "A1",
            "type": "monitor",
            "serialNumber": "SN",
            "purchaseDate": "2024-01-01",
            "condition": "new",
            "organizationId": org["id"],
            "assignedTo": person["id"],
        }
    )
    license_ = services.licenses.create(
        {
            "name": "IDE",
            "expirationDate": now_iso(NOW + timedelta(days=90)),
            "totalQuantity": 2,
            "organizationId": org["id"],
        }
    )
    services.licenses.assign_to_user(license_["id"], person["id"])
    services.licenses.update_individual_code(license_["id"], person["id"], "CODE")

    assert services.people.delete(person["id"]) is True

    released = services.assets.get_by_id(asset["id"])
    assert released["assignedTo"] is None
    assert released["status"] == "available"
    seat = services.licenses.get_by_id(license_["id"])
    assert seat["assignedTo"] == []
    assert seat["individualCodes"] == {}
    assert services.people.get_by_id(person["id"]) is None
    assert services.people.delete(person["id"]) is False


def test_update_bumps_updated_at_and_ignores_org_change(storage, settings, org, person):
    from orgtrack.services.registry import build_services

    later = build_services(storage, settings, clock=lambda: NOW + timedelta(minutes=5))
    updated = later.people.update(person["id"], {"position": "Lead", "organizationId": "other"})
    assert updated["position"] == "Lead"
    assert updated["organizationId"] == org["id"]
    assert updated["updatedAt"] == now_iso(NOW + timedelta(minutes=5))
    assert updated["createdAt"] == person["createdAt"]
    assert later.people.update("missing", {"name": "X"}) is None
    with pytest.raises(ValidationError):
        later.people.update(person["id"], {"name": "  "})
