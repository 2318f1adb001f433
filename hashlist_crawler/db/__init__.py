"""Database initialization and persistence layer."""

from hashlist_crawler.db.engine import (
    get_database_url,
    get_engine,
    get_session,
    get_session_factory,
    init_db,
    reset_engine,
    run_migrations,
)
from hashlist_crawler.db.models import Base, IngestedPageDB, TorrentDB
from hashlist_crawler.db.repositories import IngestedPageRepository, TorrentRepository

__all__ = [
    # Engine
    "get_database_url",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_db",
    "reset_engine",
    "run_migrations",
    # Models
    "Base",
    "TorrentDB",
    "IngestedPageDB",
    # Repositories
    "TorrentRepository",
    "IngestedPageRepository",
]
