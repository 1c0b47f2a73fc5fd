"""
Shared fixtures: a temporary SQLite file per test, fixed clock and settings.
"""
from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Garante que o pacote orgtrack seja importavel durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from orgtrack.core.config import Settings
from orgtrack.db.session import create_db_engine
from orgtrack.repositories.sql_storage import SQLStorage
from orgtrack.services.registry import build_services

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        app_env="test",
        database_url=f"sqlite:///{tmp_path / 'app.sqlite'}",
        log_level="WARNING",
        license_expiring_days=30,
        spa_dir=str(tmp_path / "dist"),
        cors_origins=(),
        host="127.0.0.1",
        port=8080,
    )


@pytest.fixture()
def storage(settings):
    """Empty schema, no seed data."""
    store = SQLStorage(create_db_engine(settings.database_url))
    store.ensure_schema()
    yield store
    store.dispose()


@pytest.fixture()
def services(storage, settings):
    return build_services(storage, settings, clock=lambda: NOW)


@pytest.fixture()
def org(services) -> dict:
    return services.organizations.create({"name": "O1", "description": "Primeira"})


@pytest.fixture()
def person(services, org) -> dict:
    return services.people.create(
        {"name": "P1", "email": "p1@example.com", "position": "Dev", "organizationId": org["id"]}
    )
