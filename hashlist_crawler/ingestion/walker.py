"""
Manifest Walker Module
======================

Fetches the hashlist manifest and drives the page processor over every
entry in manifest order.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol

from hashlist_crawler.core.enums import PageOutcome, RunStatus
from hashlist_crawler.core.schema import ManifestEntry
from hashlist_crawler.ingestion.errors import PayloadDecodeError
from hashlist_crawler.ingestion.processor import PageProcessor, PageResult

logger = logging.getLogger(__name__)


class ManifestSource(Protocol):
    """Anything that can list the hashlist pages."""

    async def fetch_manifest(self) -> list[ManifestEntry]: ...


@dataclass
class RunStats:
    """Counters for one crawl run."""

    status: RunStatus = RunStatus.RUNNING
    started_at: datetime | None = None
    completed_at: datetime | None = None
    pages_found: int = 0
    pages_skipped: int = 0
    pages_fetched: int = 0
    pages_ingested: int = 0
    pages_unextractable: int = 0
    pages_empty_payload: int = 0
    pages_without_records: int = 0
    records_decoded: int = 0
    torrents_inserted: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def record(self, result: PageResult) -> None:
        """Fold one page result into the counters."""
        if result.outcome.skipped:
            self.pages_skipped += 1
            return

        self.pages_fetched += 1
        self.records_decoded += result.records_decoded
        self.torrents_inserted += result.torrents_inserted

        if result.outcome == PageOutcome.INGESTED:
            self.pages_ingested += 1
        elif result.outcome == PageOutcome.UNEXTRACTABLE:
            self.pages_unextractable += 1
        elif result.outcome == PageOutcome.EMPTY_PAYLOAD:
            self.pages_empty_payload += 1
        elif result.outcome == PageOutcome.NO_RECORDS:
            self.pages_without_records += 1
        elif result.error:
            self.errors.append(f"{result.page}: {result.error}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "status": self.status.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "pages_found": self.pages_found,
            "pages_skipped": self.pages_skipped,
            "pages_fetched": self.pages_fetched,
            "pages_ingested": self.pages_ingested,
            "pages_unextractable": self.pages_unextractable,
            "pages_empty_payload": self.pages_empty_payload,
            "pages_without_records": self.pages_without_records,
            "records_decoded": self.records_decoded,
            "torrents_inserted": self.torrents_inserted,
            "errors": self.errors,
        }


class PageLocks:
    """
    One asyncio lock per page identifier.

    Holding the lock for a page serializes its ledger check, fetch, insert
    and mark against any other task working on the same identifier. A lock
    is dropped once no task holds or waits for it.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, page_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(page_id, asyncio.Lock())
        self._users[page_id] = self._users.get(page_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[page_id] -= 1
            if not self._users[page_id]:
                del self._users[page_id]
                del self._locks[page_id]

    def __len__(self) -> int:
        return len(self._locks)


class ManifestWalker:
    """
    Walks the hashlist manifest.

    With the default concurrency of 1, pages are processed strictly one after
    another in manifest order. Higher values process distinct pages in
    parallel while PageLocks keeps each identifier serialized.

    Storage calls are synchronous and run on the event loop thread, so
    parallel workers overlap only their page downloads; database work for
    all pages still happens one call at a time.
    """

    def __init__(
        self,
        source: ManifestSource,
        processor: PageProcessor,
        concurrency: int = 1,
        fail_fast: bool = False,
        limit: int | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.source = source
        self.processor = processor
        self.concurrency = concurrency
        self.fail_fast = fail_fast
        self.limit = limit
        self.stats = RunStats()
        self._locks = PageLocks()

    async def run(self) -> RunStats:
        """
        Fetch the manifest and process every entry.

        Manifest and page fetch failures propagate and end the run with
        status FAILED. Payload decode failures end the run only when
        fail_fast is set; otherwise they are recorded and the walk continues.

        Returns:
            RunStats for the completed run
        """
        self.stats = RunStats(started_at=datetime.now(UTC))

        try:
            entries = await self.source.fetch_manifest()
            self.stats.pages_found = len(entries)
            logger.info(f"Found {len(entries)} total {self.processor.classifier.source} pages")

            if self.limit is not None:
                entries = entries[: self.limit]

            if self.concurrency == 1:
                for entry in entries:
                    self.stats.record(await self._process_entry(entry))
            else:
                await self._process_concurrently(entries)

            self.stats.status = RunStatus.COMPLETED
        except Exception as e:
            self.stats.status = RunStatus.FAILED
            self.stats.errors.append(str(e))
            raise
        finally:
            self.stats.completed_at = datetime.now(UTC)

        return self.stats

    async def _process_concurrently(self, entries: list[ManifestEntry]) -> None:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def process_with_limits(entry: ManifestEntry) -> None:
            async with semaphore:
                async with self._locks.hold(entry.path):
                    self.stats.record(await self._process_entry(entry))

        tasks = [asyncio.ensure_future(process_with_limits(entry)) for entry in entries]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _process_entry(self, entry: ManifestEntry) -> PageResult:
        try:
            return await self.processor.process(entry)
        except PayloadDecodeError as e:
            if self.fail_fast:
                raise
            logger.error(f"Failed to decode payload for {entry.path}: {e}")
            return PageResult(page=entry.path, outcome=PageOutcome.DECODE_FAILED, error=str(e))
