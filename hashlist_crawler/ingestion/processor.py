"""
Page Processor Module
=====================

Handles one hashlist page end to end:

1. Skip pages with no path or already in the ledger
2. Fetch the page
3. Extract the embedded payload
4. Decode it into raw torrent rows
5. Classify and filter the rows
6. Insert the survivors, then mark the page in the ledger
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from hashlist_crawler.core.enums import PageOutcome
from hashlist_crawler.core.schema import ManifestEntry
from hashlist_crawler.ingestion.classifier import RecordClassifier
from hashlist_crawler.ingestion.codec import decode_payload, extract_encoded_payload
from hashlist_crawler.ingestion.errors import PayloadDecodeError
from hashlist_crawler.ingestion.ledger import IngestionLedger
from hashlist_crawler.ingestion.storage import DataStorage

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    """Anything that can fetch raw page content by manifest path."""

    async def fetch_page(self, path: str) -> str: ...


@dataclass
class PageResult:
    """What happened to one manifest entry."""

    page: str
    outcome: PageOutcome
    records_decoded: int = 0
    records_accepted: int = 0
    torrents_inserted: int = 0
    error: str | None = None

    @property
    def fetched(self) -> bool:
        """True when the page content was downloaded."""
        return not self.outcome.skipped


class PageProcessor:
    """Runs a single manifest entry through the ingestion pipeline."""

    def __init__(
        self,
        fetcher: PageFetcher,
        ledger: IngestionLedger,
        storage: DataStorage,
        classifier: RecordClassifier,
    ) -> None:
        self.fetcher = fetcher
        self.ledger = ledger
        self.storage = storage
        self.classifier = classifier

    async def process(self, entry: ManifestEntry) -> PageResult:
        """
        Process one manifest entry.

        Fetch and storage errors propagate. A payload that cannot be decoded
        raises PayloadDecodeError with the page attached; the page is left
        unmarked.

        Args:
            entry: Manifest entry to process

        Returns:
            PageResult describing the outcome
        """
        name = entry.path
        if not name:
            return PageResult(page="", outcome=PageOutcome.SKIPPED_EMPTY_PATH)

        if self.ledger.check(name):
            return PageResult(page=name, outcome=PageOutcome.SKIPPED_ALREADY_INGESTED)

        page_source = await self.fetcher.fetch_page(name)

        encoded = extract_encoded_payload(page_source)
        if encoded is None:
            logger.warning(f"Failed to match hash collection for {name}")
            self.ledger.mark(name)
            return PageResult(page=name, outcome=PageOutcome.UNEXTRACTABLE)

        if not encoded:
            logger.warning(f"Failed to extract encoded json for {name}")
            return PageResult(page=name, outcome=PageOutcome.EMPTY_PAYLOAD)

        try:
            items = decode_payload(encoded)
        except PayloadDecodeError as e:
            e.page = name
            raise

        records = self.classifier.classify_many(items)
        result = PageResult(
            page=name,
            outcome=PageOutcome.NO_RECORDS,
            records_decoded=len(items),
            records_accepted=len(records),
        )

        if not records:
            logger.warning(f"No torrents found in {self.classifier.source} response for {name}")
            return result

        result.torrents_inserted = self.storage.insert_torrents(records)

        mark = self.ledger.mark(name)
        if not mark.success:
            logger.error(f"Failed to mark page as ingested: [{mark.error_message}]")
            result.outcome = PageOutcome.MARK_FAILED
            result.error = mark.error_message
            return result

        logger.info(f"Successfully marked page {name} as ingested")
        result.outcome = PageOutcome.INGESTED
        return result
