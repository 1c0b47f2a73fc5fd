"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from orgtrack.core.config import get_settings

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignora FOREIGN KEY/ON DELETE sem este pragma por conexao
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str) -> Engine:
    """Build an engine for the given URL, preparing SQLite files and FK enforcement."""
    url_text = (database_url or "").strip()
    if not url_text:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    url = make_url(url_text)
    if not url.drivername.startswith("sqlite"):
        return create_engine(url, future=True, pool_pre_ping=True)

    database = url.database or ""
    if database and database != ":memory:":
        Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(url, future=True)
    else:
        engine = create_engine(
            url,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


@lru_cache
def get_engine() -> Engine:
    return create_db_engine(get_settings().database_url)


def make_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)


@contextmanager
def session_scope(factory: sessionmaker):
    """Yield a session wrapped in a transaction: commit on success, rollback on error."""
    session: Session = factory()
    try:
        with session.begin():
            yield session
    finally:
        session.close()
