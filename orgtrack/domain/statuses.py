"""Domain helpers for derived statuses and accepted enum values.

All functions are pure: the current time is always passed in, never read here.
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional

from orgtrack.core.utils import parse_timestamp

PERSON_STATUSES = {"active", "inactive"}
ASSET_TYPES = {"notebook", "monitor", "adapter", "other"}
ASSET_STATUSES = {"available", "allocated", "maintenance"}
ASSET_CONDITIONS = {"new", "good", "fair", "poor"}

LICENSE_ACTIVE = "active"
LICENSE_EXPIRING_SOON = "expiring_soon"
LICENSE_EXPIRED = "expired"
DEFAULT_EXPIRING_DAYS = 30

STOCK_AVAILABLE = "available"
STOCK_LOW = "low_stock"
STOCK_OUT = "out_of_stock"
STOCK_LABELS = {
    STOCK_AVAILABLE: "Disponível",
    STOCK_LOW: "Estoque Baixo",
    STOCK_OUT: "Sem Estoque",
}

SECONDS_PER_DAY = 24 * 60 * 60


def days_until(expiration_date: object, now: datetime) -> Optional[int]:
    """
    Whole days from now until expiration, rounded up (a license that expires in
    a few hours still counts as 0 days left). None when the date is unparseable.
    """
    expiration = parse_timestamp(expiration_date)
    if expiration is None:
        return None
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    delta = (expiration - now).total_seconds() / SECONDS_PER_DAY
    return int(math.ceil(delta))


def license_status(expiration_date: object, now: datetime, threshold_days: int = DEFAULT_EXPIRING_DAYS) -> str:
    remaining = days_until(expiration_date, now)
    if remaining is None or remaining < 0:
        return LICENSE_EXPIRED
    if remaining <= threshold_days:
        return LICENSE_EXPIRING_SOON
    return LICENSE_ACTIVE


def inventory_status(quantity: object, min_quantity: object) -> str:
    qty = _as_int(quantity)
    minimum = _as_int(min_quantity)
    if qty <= 0:
        return STOCK_OUT
    if qty <= minimum:
        return STOCK_LOW
    return STOCK_AVAILABLE


def reconcile_asset_status(status: Optional[str], assigned_to: Optional[str]) -> str:
    """Keep status == allocated exactly when the asset has an assignee."""
    if assigned_to:
        return "allocated"
    if status == "allocated" or not status:
        return "available"
    return status


def _as_int(value: object) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
