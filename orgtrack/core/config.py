"""
Configuration helpers for the orgtrack backend.

Routers/services never read os.environ directly: they receive a Settings
instance built from the environment (database location, logging, SPA build
directory, license expiry window).
"""

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_DATABASE_URL = "sqlite:///./database/app.sqlite"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    log_level: str
    license_expiring_days: int
    spa_dir: str
    cors_origins: tuple[str, ...]
    host: str
    port: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _list(value: str | None) -> tuple[str, ...]:
        if not value:
            return ()
        return tuple(item.strip() for item in value.split(",") if item.strip())

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    cors = _list(os.getenv("CORS_ORIGINS"))
    if not cors and app_env != "prod":
        cors = ("*",)

    return Settings(
        app_env=app_env,
        database_url=(os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL).strip(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        license_expiring_days=_int(os.getenv("LICENSE_EXPIRING_DAYS", "30"), 30),
        spa_dir=os.getenv("SPA_DIR", "dist"),
        cors_origins=cors,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "8080"), 8080),
    )
