"""Teams and team membership."""

from __future__ import annotations

from typing import Optional

from orgtrack.core.logging_factory import get_logger
from orgtrack.core.utils import now_iso
from orgtrack.services.base import CollectionService, by_name, find_index
from orgtrack.services.record_mapper import compose_person, compose_team

logger = get_logger(__name__)


class TeamService(CollectionService):
    collection = "teams"
    writable_fields = frozenset({"name", "description", "organizationId", "managerId"})
    updatable_fields = frozenset({"name", "description", "managerId"})

    def _load_context(self) -> dict:
        return {"people": self._rows("people")}

    def _compose(self, row: dict, context: dict) -> dict:
        return compose_team(row, context["people"])

    def delete(self, record_id: str) -> bool:
        """Detach members (teamId -> None) first, then remove the team."""
        if self._find(record_id) is None:
            return False
        people = self._rows("people")
        now = now_iso(self._now())
        detached = 0
        for person in people:
            if person.get("team_id") == record_id:
                person["team_id"] = None
                person["updated_at"] = now
                detached += 1
        if detached:
            self._save(people, "people")
            logger.info("team %s: %d member(s) detached", record_id, detached)
        return super().delete(record_id)

    def get_team_members(self, team_id: str) -> list[dict]:
        """Active people of the team, by name. Unknown team -> []."""
        teams = {row["id"]: row for row in self._rows()}
        if team_id not in teams:
            return []
        assets = self._rows("assets")
        licenses = self._rows("licenses")
        now = self._now()
        members = [
            compose_person(
                row,
                teams_by_id=teams,
                assets=assets,
                licenses=licenses,
                now=now,
                threshold_days=self.settings.license_expiring_days,
            )
            for row in self._rows("people")
            if row.get("team_id") == team_id and (row.get("status") or "active") == "active"
        ]
        return by_name(members)

    def add_person(self, team_id: str, person_id: str) -> bool:
        team = self._find(team_id)
        if team is None:
            return False
        people = self._rows("people")
        index = find_index(people, person_id)
        if index < 0 or people[index].get("organization_id") != team.get("organization_id"):
            return False
        people[index]["team_id"] = team_id
        people[index]["updated_at"] = now_iso(self._now())
        self._save(people, "people")
        return True

    def remove_person(self, person_id: str, team_id: Optional[str] = None) -> bool:
        """Clear the person's team (only if it matches ``team_id`` when given)."""
        people = self._rows("people")
        index = find_index(people, person_id)
        if index < 0 or not people[index].get("team_id"):
            return False
        if team_id is not None and people[index].get("team_id") != team_id:
            return False
        people[index]["team_id"] = None
        people[index]["updated_at"] = now_iso(self._now())
        self._save(people, "people")
        return True
