"""
Utility helpers shared across repositories/services.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def now_iso(now: Optional[datetime] = None) -> str:
    """
    ISO-8601 em UTC com milissegundos e sufixo Z (mesmo formato do toISOString do front).
    """
    value = (now or utcnow()).astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_id() -> str:
    return str(uuid.uuid4())


def parse_timestamp(value: object) -> Optional[datetime]:
    """
    Parse ISO dates ("2024-12-31") and datetimes ("2024-12-31T10:00:00.000Z").

    Naive values are treated as UTC. Returns None for empty or unparseable input.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        if not text:
            return None
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
