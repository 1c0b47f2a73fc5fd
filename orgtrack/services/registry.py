"""Wires every service to one storage handle."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from orgtrack.core.config import Settings, get_settings
from orgtrack.core.utils import utcnow
from orgtrack.repositories.sql_storage import SQLStorage
from orgtrack.services.asset_service import AssetService
from orgtrack.services.inventory_service import InventoryService
from orgtrack.services.license_service import LicenseService
from orgtrack.services.organization_service import OrganizationService
from orgtrack.services.person_service import PersonService
from orgtrack.services.snapshot_service import SnapshotService
from orgtrack.services.team_service import TeamService


@dataclass(frozen=True)
class ServiceRegistry:
    storage: SQLStorage
    organizations: OrganizationService
    teams: TeamService
    people: PersonService
    assets: AssetService
    licenses: LicenseService
    inventory: InventoryService
    snapshots: SnapshotService


def build_services(
    storage: SQLStorage,
    settings: Optional[Settings] = None,
    clock: Callable[[], datetime] = utcnow,
) -> ServiceRegistry:
    settings = settings or get_settings()
    return ServiceRegistry(
        storage=storage,
        organizations=OrganizationService(storage, settings, clock),
        teams=TeamService(storage, settings, clock),
        people=PersonService(storage, settings, clock),
        assets=AssetService(storage, settings, clock),
        licenses=LicenseService(storage, settings, clock),
        inventory=InventoryService(storage, settings, clock),
        snapshots=SnapshotService(storage, clock),
    )
