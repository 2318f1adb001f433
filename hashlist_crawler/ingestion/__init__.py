"""
Hashlist Ingestion Pipeline
===========================

This package ingests Debrid Media Manager hashlist pages into the torrent
store, handling each page at most once.

Pipeline Stages:
1. Manifest - List every page in the hashlist repository
2. Ledger - Skip pages already handled on a previous run
3. Fetch - Download the page markup
4. Extract - Pull the lz-string payload out of the iframe marker
5. Decode - Decompress and parse the torrent rows
6. Classify - Keep movie and TV torrents without banned terms
7. Persist - Insert the torrents, then mark the page as ingested
"""

from hashlist_crawler.ingestion.classifier import (
    ClassificationService,
    PttClassificationService,
    RecordClassifier,
)
from hashlist_crawler.ingestion.codec import (
    decode_payload,
    extract_encoded_payload,
)
from hashlist_crawler.ingestion.config import (
    CrawlerConfig,
    FilterConfig,
    HashlistConfig,
    HttpConfig,
    get_default_config,
    reset_default_config,
)
from hashlist_crawler.ingestion.crawler import HashlistClient, parse_manifest
from hashlist_crawler.ingestion.errors import HashlistError, ManifestError, PayloadDecodeError
from hashlist_crawler.ingestion.jobs import build_walker, crawl_hashlists
from hashlist_crawler.ingestion.ledger import IngestionLedger
from hashlist_crawler.ingestion.processor import PageProcessor, PageResult
from hashlist_crawler.ingestion.storage import DataStorage, SqlAlchemyStorage, StorageResult
from hashlist_crawler.ingestion.walker import ManifestWalker, PageLocks, RunStats

__all__ = [
    # Codec
    "extract_encoded_payload",
    "decode_payload",
    # Classifier
    "ClassificationService",
    "PttClassificationService",
    "RecordClassifier",
    # Config
    "CrawlerConfig",
    "HashlistConfig",
    "HttpConfig",
    "FilterConfig",
    "get_default_config",
    "reset_default_config",
    # Client
    "HashlistClient",
    "parse_manifest",
    # Errors
    "HashlistError",
    "ManifestError",
    "PayloadDecodeError",
    # Storage and ledger
    "DataStorage",
    "SqlAlchemyStorage",
    "StorageResult",
    "IngestionLedger",
    # Pipeline
    "PageProcessor",
    "PageResult",
    "ManifestWalker",
    "PageLocks",
    "RunStats",
    "build_walker",
    "crawl_hashlists",
]
