"""Create the schema and seed the default organization/team."""
from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from orgtrack.core.logging_factory import get_logger
from orgtrack.core.utils import new_id, now_iso

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata

logger = get_logger(__name__)

DEFAULT_ORGANIZATION = {
    "name": "Organização Principal",
    "description": "Organização padrão do sistema",
}
DEFAULT_TEAM = {
    "name": "Desenvolvimento",
    "description": "Time de desenvolvimento de software",
}


def ensure_schema(engine: Engine) -> None:
    """Create missing tables; safe to call on every start."""
    Base.metadata.create_all(bind=engine)


def seed_defaults(storage) -> bool:
    """
    Insert one organization and one team when there are no organizations.

    Returns True when rows were inserted.
    """
    if storage.count("organizations") > 0:
        return False
    now = now_iso()
    org_id = new_id()
    organization = {"id": org_id, **DEFAULT_ORGANIZATION, "created_at": now, "updated_at": now}
    team = {
        "id": new_id(),
        **DEFAULT_TEAM,
        "organization_id": org_id,
        "manager_id": None,
        "created_at": now,
        "updated_at": now,
    }
    storage.replace_all({"organizations": [organization], "teams": [team]})
    logger.info("Initial data inserted (organization %s)", org_id)
    return True


def init_database(storage) -> bool:
    """Ensure tables exist and seed defaults; raises StorageError when the store is unusable."""
    storage.ensure_schema()
    return seed_defaults(storage)


if __name__ == "__main__":
    from orgtrack.repositories.sql_storage import SQLStorage, StorageError

    try:
        init_database(SQLStorage(get_engine()))
        print("Database tables created successfully.")
    except (SQLAlchemyError, StorageError) as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
