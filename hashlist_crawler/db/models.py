"""SQLAlchemy ORM models for the hashlist crawler database."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


def _generate_uuid() -> str:
    """Generate a UUID string."""
    return str(uuid4())


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class TorrentDB(Base):
    """
    Database model for ingested torrents.

    One row per info hash; a torrent seen again on a later page is ignored.
    """

    __tablename__ = "torrents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_generate_uuid)
    info_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    size: Mapped[str] = mapped_column(String(32), nullable=False)
    seeders: Mapped[int] = mapped_column(Integer, default=0)
    leechers: Mapped[int] = mapped_column(Integer, default=0)
    ingested_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    def __repr__(self) -> str:
        return f"<TorrentDB(info_hash={self.info_hash}, category='{self.category}')>"


class IngestedPageDB(Base):
    """
    Database model for the page ingestion ledger.

    A row exists once a hashlist page has been fully handled.
    """

    __tablename__ = "ingested_pages"

    name: Mapped[str] = mapped_column(String(512), primary_key=True)
    ingested_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    def __repr__(self) -> str:
        return f"<IngestedPageDB(name='{self.name}')>"
