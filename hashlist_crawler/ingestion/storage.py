"""
Torrent Storage Module
======================

Provides the abstract storage interface used by the ingestion pipeline and
its SQLAlchemy implementation. Storage owns both the torrent table and the
page ingestion ledger.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hashlist_crawler.core.schema import MediaRecord
from hashlist_crawler.db.engine import get_session_factory
from hashlist_crawler.db.repositories import IngestedPageRepository, TorrentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageResult:
    """Outcome of a storage write that reports failure instead of raising."""

    success: bool
    error_message: str | None = None


class DataStorage(ABC):
    """
    Abstract base class for torrent storage.

    Implementations persist classified torrents and remember which hashlist
    pages have already been handled.
    """

    @abstractmethod
    def page_ingested(self, name: str) -> bool:
        """
        Check whether a page has been marked as ingested.

        Args:
            name: Page identifier (manifest path)

        Returns:
            True if marked, False otherwise
        """
        pass

    @abstractmethod
    def mark_page_as_ingested(self, name: str) -> StorageResult:
        """
        Mark a page as ingested.

        Marking an already marked page succeeds.

        Args:
            name: Page identifier (manifest path)

        Returns:
            StorageResult describing success or the failure reason
        """
        pass

    @abstractmethod
    def insert_torrents(self, records: Sequence[MediaRecord]) -> int:
        """
        Persist a batch of torrents.

        Args:
            records: Classified torrents from one page

        Returns:
            Number of torrents newly stored
        """
        pass


class SqlAlchemyStorage(DataStorage):
    """DataStorage backed by the SQLAlchemy database."""

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        """
        Initialize SQLAlchemy storage.

        Args:
            session_factory: Session factory; defaults to the global one
        """
        self._session_factory = session_factory or get_session_factory()

    def page_ingested(self, name: str) -> bool:
        with self._session_factory() as session:
            return IngestedPageRepository(session).exists(name)

    def mark_page_as_ingested(self, name: str) -> StorageResult:
        with self._session_factory() as session:
            try:
                IngestedPageRepository(session).mark(name)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Failed to mark page {name} as ingested: {e}")
                return StorageResult(success=False, error_message=str(e))
        return StorageResult(success=True)

    def insert_torrents(self, records: Sequence[MediaRecord]) -> int:
        with self._session_factory() as session:
            inserted = TorrentRepository(session).insert_many(records)
            session.commit()
        logger.info(f"Inserted {inserted} of {len(records)} torrents")
        return inserted
