"""
Crawl Jobs Module
=================

Wires configuration, HTTP client, storage and classifier together and runs
one crawl of the hashlist repository.
"""

from __future__ import annotations

import logging

import httpx

from hashlist_crawler.core.enums import RunStatus
from hashlist_crawler.ingestion.classifier import (
    ClassificationService,
    PttClassificationService,
    RecordClassifier,
)
from hashlist_crawler.ingestion.config import CrawlerConfig, get_default_config
from hashlist_crawler.ingestion.crawler import HashlistClient
from hashlist_crawler.ingestion.ledger import IngestionLedger
from hashlist_crawler.ingestion.processor import PageProcessor
from hashlist_crawler.ingestion.storage import DataStorage, SqlAlchemyStorage
from hashlist_crawler.ingestion.walker import ManifestWalker, RunStats

logger = logging.getLogger(__name__)


def build_classifier(
    config: CrawlerConfig,
    service: ClassificationService | None = None,
) -> RecordClassifier:
    """Create the record classifier described by the configuration."""
    service = service or PttClassificationService(config.filters.banned_terms)
    return RecordClassifier(service, source=config.hashlist.source)


def build_walker(
    client: HashlistClient,
    storage: DataStorage,
    config: CrawlerConfig,
    service: ClassificationService | None = None,
    limit: int | None = None,
) -> ManifestWalker:
    """Assemble a ManifestWalker and its PageProcessor."""
    processor = PageProcessor(
        fetcher=client,
        ledger=IngestionLedger(storage),
        storage=storage,
        classifier=build_classifier(config, service),
    )
    return ManifestWalker(
        source=client,
        processor=processor,
        concurrency=config.concurrency,
        fail_fast=config.fail_fast,
        limit=limit,
    )


async def crawl_hashlists(
    config: CrawlerConfig | None = None,
    storage: DataStorage | None = None,
    service: ClassificationService | None = None,
    limit: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RunStats:
    """
    Run one crawl of the hashlist repository.

    Unlike ManifestWalker.run, this never raises for crawl failures; the
    returned RunStats carries status FAILED and the error instead.

    Args:
        config: Crawler configuration; defaults to the global one
        storage: Torrent storage; defaults to the SQLAlchemy database
        service: Title classification service; defaults to PTT
        limit: Optional cap on manifest entries to process
        transport: Optional httpx transport (used by tests)

    Returns:
        RunStats for the run
    """
    config = config or get_default_config()
    storage = storage or SqlAlchemyStorage()

    async with HashlistClient(config.hashlist, config.http, transport=transport) as client:
        walker = build_walker(client, storage, config, service=service, limit=limit)
        try:
            return await walker.run()
        except Exception as e:
            logger.exception(f"Hashlist crawl failed: {e}")
            if walker.stats.status != RunStatus.FAILED:
                walker.stats.status = RunStatus.FAILED
                walker.stats.errors.append(str(e))
            return walker.stats
