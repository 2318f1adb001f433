"""
Record Classifier Module
========================

Turns decoded hashlist rows into persisted torrent records, dropping rows
that are incomplete, not recognisably a movie or TV release, or that contain
banned terms.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

import PTT

from hashlist_crawler.core.enums import Category, TorrentType
from hashlist_crawler.core.schema import MediaRecord, RawRecord

logger = logging.getLogger(__name__)

CATEGORY_BY_TYPE = {
    TorrentType.MOVIE: Category.MOVIES,
    TorrentType.TV: Category.TV,
}


class ClassificationService(ABC):
    """Decides what a torrent title is and whether it may be stored."""

    @abstractmethod
    def classify_title(self, title: str) -> TorrentType:
        """
        Infer the media type of a torrent title.

        Args:
            title: Torrent file or folder name

        Returns:
            TorrentType.MOVIE, TorrentType.TV or TorrentType.UNKNOWN
        """
        pass

    @abstractmethod
    def contains_banned_terms(self, title: str) -> bool:
        """Check whether a title contains any banned term."""
        pass


class PttClassificationService(ClassificationService):
    """
    Title classification backed by the PTT release-name parser.

    A title with season or episode numbers is TV; otherwise a title with a
    release year is a movie. Anything else is unknown.
    """

    def __init__(self, banned_terms: Iterable[str] | None = None) -> None:
        terms = [t.strip() for t in (banned_terms or []) if t and t.strip()]
        self.banned_terms = terms
        self._banned_pattern: re.Pattern[str] | None = None
        if terms:
            alternation = "|".join(re.escape(t) for t in sorted(terms, key=len, reverse=True))
            # Underscores and dots separate words in release names
            self._banned_pattern = re.compile(
                rf"(?<![^\W_])(?:{alternation})(?![^\W_])", re.IGNORECASE
            )

    def parse(self, title: str) -> dict[str, Any]:
        """Parse a release name into its components."""
        return PTT.parse_title(title)

    def classify_title(self, title: str) -> TorrentType:
        if not title or not title.strip():
            return TorrentType.UNKNOWN

        parsed = self.parse(title)
        if not parsed.get("title"):
            return TorrentType.UNKNOWN

        if parsed.get("seasons") or parsed.get("episodes"):
            return TorrentType.TV

        if parsed.get("year"):
            return TorrentType.MOVIE

        return TorrentType.UNKNOWN

    def contains_banned_terms(self, title: str) -> bool:
        if self._banned_pattern is None:
            return False
        return self._banned_pattern.search(title) is not None


class RecordClassifier:
    """Maps raw hashlist rows to MediaRecords."""

    def __init__(self, service: ClassificationService, source: str = "DMM") -> None:
        self.service = service
        self.source = source

    def classify(self, item: dict[str, Any] | RawRecord) -> MediaRecord | None:
        """
        Classify one decoded row.

        Rows missing ``filename``, ``bytes`` or ``hash`` are dropped silently.
        Rows whose title is banned are logged with their info hash.

        Args:
            item: Decoded JSON object or an already validated RawRecord

        Returns:
            MediaRecord, or None if the row is rejected
        """
        raw = item if isinstance(item, RawRecord) else RawRecord.from_item(item)
        if raw is None or not raw.filename:
            return None

        torrent_type = self.service.classify_title(raw.filename)
        category = CATEGORY_BY_TYPE.get(torrent_type)
        if category is None:
            logger.debug(f"Unrecognised torrent type for {raw.info_hash}: {raw.filename}")
            return None

        if self.service.contains_banned_terms(raw.filename):
            logger.warning(
                f"Banned terms found in torrent title for ingested infoHash: {raw.info_hash}. Skipping"
            )
            return None

        return MediaRecord(
            source=self.source,
            name=raw.filename,
            category=category,
            size=str(raw.size),
            info_hash=raw.info_hash,
            seeders=0,
            leechers=0,
        )

    def classify_many(self, items: Iterable[dict[str, Any] | RawRecord]) -> list[MediaRecord]:
        """Classify a batch, keeping only accepted records in input order."""
        records = []
        for item in items:
            record = self.classify(item)
            if record is not None:
                records.append(record)
        return records
