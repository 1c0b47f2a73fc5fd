"""SQLAlchemy models for the six tenant collections plus the backup slot.

Column names are the stored (snake_case) field names used by the raw
``/api/database`` endpoints and by exported snapshots. Timestamps and dates are
kept as ISO-8601 text so snapshots round-trip unchanged.
"""
from __future__ import annotations

from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    JSON,
)

from .session import Base


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(String(40), nullable=False)
    updated_at = Column(String(40), nullable=False)


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    organization_id = Column(String(64), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    # weak reference: no FK, the manager may have been deleted
    manager_id = Column(String(64), nullable=True)
    created_at = Column(String(40), nullable=False)
    updated_at = Column(String(40), nullable=False)


class Person(Base):
    __tablename__ = "people"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    position = Column(String(255), nullable=True)
    status = Column(String(16), nullable=True, default="active")
    organization_id = Column(String(64), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    team_id = Column(String(64), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    manager_id = Column(String(64), nullable=True)
    subordinates = Column(JSON, nullable=False, default=list)
    created_at = Column(String(40), nullable=False)
    updated_at = Column(String(40), nullable=False)


class Asset(Base):
    __tablename__ = "assets"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    type = Column(String(32), nullable=True)
    serial_number = Column(String(255), nullable=True)
    status = Column(String(32), nullable=True, default="available")
    condition = Column(String(32), nullable=True)
    value = Column(Float, nullable=True)
    purchase_date = Column(String(40), nullable=True)
    assigned_to = Column(String(64), ForeignKey("people.id", ondelete="SET NULL"), nullable=True)
    organization_id = Column(String(64), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(String(40), nullable=False)
    updated_at = Column(String(40), nullable=False)


class License(Base):
    __tablename__ = "licenses"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    expiration_date = Column(String(40), nullable=True)
    total_quantity = Column(Integer, nullable=False, default=0)
    cost = Column(Float, nullable=True)
    vendor = Column(String(255), nullable=True)
    organization_id = Column(String(64), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    assigned_to = Column(JSON, nullable=False, default=list)
    license_code = Column(Text, nullable=True)
    individual_codes = Column(JSON, nullable=False, default=dict)
    created_at = Column(String(40), nullable=False)
    updated_at = Column(String(40), nullable=False)


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    min_quantity = Column(Integer, nullable=False, default=0)
    location = Column(String(255), nullable=True)
    organization_id = Column(String(64), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    cost_per_unit = Column(Float, nullable=True)
    supplier = Column(String(255), nullable=True)
    created_at = Column(String(40), nullable=False)
    updated_at = Column(String(40), nullable=False)


class SnapshotBackup(Base):
    """Single rolling backup slot written before import/clear."""

    __tablename__ = "backups"

    slot = Column(Integer, primary_key=True)
    created_at = Column(String(40), nullable=False)
    payload = Column(JSON, nullable=False)


# Parents before children: replace order for multi-collection writes.
COLLECTION_MODELS = {
    "organizations": Organization,
    "teams": Team,
    "people": Person,
    "assets": Asset,
    "licenses": License,
    "inventory": InventoryItem,
}

COLLECTIONS = tuple(COLLECTION_MODELS)

JSON_DEFAULTS = {
    ("people", "subordinates"): list,
    ("licenses", "assigned_to"): list,
    ("licenses", "individual_codes"): dict,
}
