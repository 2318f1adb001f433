"""
Database Engine Module
======================

Resolves where the crawler database lives, owns the process-wide engine and
session factory, and brings the schema up to date either directly or through
the packaged Alembic migrations.
"""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from hashlist_crawler.db.models import Base

DEFAULT_DB_PATH = "~/.hashlist_crawler/hashlist.db"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_database_url(db_path: Path | str | None = None) -> str:
    """
    Resolve the SQLite URL of the crawler database.

    The location is taken from ``db_path``, then ``DATABASE_URL``, then
    ``~/.hashlist_crawler/hashlist.db``. A value starting with ``sqlite`` is
    used as a URL; anything else is a file path, ``~`` expanded, whose parent
    directory is created if missing.
    """
    location = db_path if db_path is not None else os.environ.get("DATABASE_URL") or DEFAULT_DB_PATH
    if isinstance(location, str) and location.startswith("sqlite"):
        return location

    path = Path(location).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{path}"


def get_engine(db_path: Path | str | None = None) -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = create_engine(
            get_database_url(db_path),
            connect_args={"check_same_thread": False},
        )
    return _engine


def get_session_factory(db_path: Path | str | None = None) -> sessionmaker[Session]:
    """Return the process-wide session factory bound to get_engine()."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autoflush=False, bind=get_engine(db_path))
    return _session_factory


def reset_engine() -> None:
    """Dispose of the process-wide engine so the next call rebuilds it."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


@contextmanager
def get_session(db_path: Path | str | None = None) -> Iterator[Session]:
    """Open a session on the crawler database; the caller commits."""
    session = get_session_factory(db_path)()
    try:
        yield session
    finally:
        session.close()


def init_db(db_path: Path | str | None = None) -> None:
    """Create any missing tables straight from the ORM models."""
    Base.metadata.create_all(bind=get_engine(db_path))


def run_migrations(db_path: Path | str | None = None, revision: str = "head") -> None:
    """
    Upgrade the database schema with Alembic.

    The Alembic configuration is assembled here from the migrations shipped
    inside the package, so no alembic.ini is needed at runtime.

    Args:
        db_path: Optional database location, resolved like get_database_url
        revision: Target revision
    """
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    config.set_main_option("sqlalchemy.url", get_database_url(db_path))
    command.upgrade(config, revision)
