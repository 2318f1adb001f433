"""Repository classes for database operations."""

from collections.abc import Sequence
from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from hashlist_crawler.core.enums import Category
from hashlist_crawler.core.schema import MediaRecord
from hashlist_crawler.db.models import IngestedPageDB, TorrentDB


def _utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class TorrentRepository:
    """Repository for persisted torrents."""

    def __init__(self, session: Session):
        self.session = session

    def insert_many(self, records: Sequence[MediaRecord]) -> int:
        """
        Insert torrents, skipping info hashes that are already stored.

        Args:
            records: Classified records to persist.

        Returns:
            Number of rows actually inserted.
        """
        if not records:
            return 0

        now = _utc_now()
        rows = [
            {
                "id": str(uuid4()),
                "info_hash": record.info_hash,
                "name": record.name,
                "source": record.source,
                "category": record.category.value,
                "size": record.size,
                "seeders": record.seeders,
                "leechers": record.leechers,
                "ingested_at": now,
            }
            for record in records
        ]
        before = self.count()
        stmt = sqlite_insert(TorrentDB.__table__).on_conflict_do_nothing(
            index_elements=["info_hash"]
        )
        self.session.execute(stmt, rows)
        self.session.flush()
        return self.count() - before

    def get_by_info_hash(self, info_hash: str) -> MediaRecord | None:
        """Get a torrent by info hash."""
        stmt = select(TorrentDB).where(TorrentDB.info_hash == info_hash)
        db_item = self.session.execute(stmt).scalar_one_or_none()
        return self._to_domain(db_item) if db_item else None

    def list_recent(self, limit: int = 50, offset: int = 0) -> list[MediaRecord]:
        """List torrents, most recently ingested first."""
        stmt = (
            select(TorrentDB)
            .order_by(TorrentDB.ingested_at.desc(), TorrentDB.name)
            .limit(limit)
            .offset(offset)
        )
        result = self.session.execute(stmt).scalars().all()
        return [self._to_domain(t) for t in result]

    def count(self, category: Category | None = None) -> int:
        """Count stored torrents, optionally within one category."""
        stmt = select(func.count()).select_from(TorrentDB)
        if category is not None:
            stmt = stmt.where(TorrentDB.category == category.value)
        return self.session.execute(stmt).scalar() or 0

    def _to_domain(self, db_item: TorrentDB) -> MediaRecord:
        """Convert database model to domain model."""
        return MediaRecord(
            source=db_item.source,
            name=db_item.name,
            category=Category(db_item.category),
            size=db_item.size,
            info_hash=db_item.info_hash,
            seeders=db_item.seeders,
            leechers=db_item.leechers,
        )


class IngestedPageRepository:
    """Repository for the page ingestion ledger."""

    def __init__(self, session: Session):
        self.session = session

    def exists(self, name: str) -> bool:
        """Check whether a page has been marked as ingested."""
        stmt = select(IngestedPageDB.name).where(IngestedPageDB.name == name)
        return self.session.execute(stmt).first() is not None

    def get(self, name: str) -> IngestedPageDB | None:
        """Get the ledger row for a page."""
        return self.session.get(IngestedPageDB, name)

    def mark(self, name: str) -> bool:
        """
        Mark a page as ingested.

        Returns:
            True if the page was newly marked, False if it already was.
        """
        stmt = (
            sqlite_insert(IngestedPageDB.__table__)
            .values(name=name, ingested_at=_utc_now())
            .on_conflict_do_nothing(index_elements=["name"])
        )
        result = self.session.execute(stmt)
        self.session.flush()
        return (result.rowcount or 0) > 0

    def list_all(self, limit: int = 100, offset: int = 0) -> list[IngestedPageDB]:
        """List marked pages, most recent first."""
        stmt = (
            select(IngestedPageDB)
            .order_by(IngestedPageDB.ingested_at.desc(), IngestedPageDB.name)
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.execute(stmt).scalars().all())

    def count(self) -> int:
        """Count marked pages."""
        stmt = select(func.count()).select_from(IngestedPageDB)
        return self.session.execute(stmt).scalar() or 0
