"""Per-page ingestion ledger backed by storage."""

from __future__ import annotations

import logging

from hashlist_crawler.ingestion.storage import DataStorage, StorageResult

logger = logging.getLogger(__name__)


class IngestionLedger:
    """
    Tracks which hashlist pages have been handled.

    The mark is written after a page's outcome is known and never cleared.
    It is not written in the same transaction as the page's torrents, so a
    failed mark after a successful insert leaves the page eligible for a
    second insert on the next run.
    """

    def __init__(self, storage: DataStorage) -> None:
        self.storage = storage

    def check(self, page_id: str) -> bool:
        """Return True if the page was already ingested."""
        return self.storage.page_ingested(page_id)

    def mark(self, page_id: str) -> StorageResult:
        """Record a page as ingested. Marking twice is not an error."""
        result = self.storage.mark_page_as_ingested(page_id)
        if result.success:
            logger.debug(f"Marked page {page_id} as ingested")
        return result
