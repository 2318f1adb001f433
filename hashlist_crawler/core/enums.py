"""Enums for torrent classification and page processing."""

from enum import Enum


class TorrentType(str, Enum):
    """Media type inferred from a torrent title."""

    MOVIE = "movie"
    TV = "tv"
    UNKNOWN = "unknown"


class Category(str, Enum):
    """Category stored on persisted torrents."""

    MOVIES = "movies"
    TV = "tv"


class PageOutcome(str, Enum):
    """Result of processing a single hashlist page."""

    SKIPPED_EMPTY_PATH = "skipped_empty_path"
    SKIPPED_ALREADY_INGESTED = "skipped_already_ingested"
    UNEXTRACTABLE = "unextractable"
    EMPTY_PAYLOAD = "empty_payload"
    NO_RECORDS = "no_records"
    INGESTED = "ingested"
    MARK_FAILED = "mark_failed"
    DECODE_FAILED = "decode_failed"

    @property
    def skipped(self) -> bool:
        """True when the page was not fetched at all."""
        return self in (PageOutcome.SKIPPED_EMPTY_PATH, PageOutcome.SKIPPED_ALREADY_INGESTED)


class RunStatus(str, Enum):
    """Status of a crawl run."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
