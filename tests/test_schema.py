"""Tests for the hashlist Pydantic models."""

import pytest
from pydantic import ValidationError

from hashlist_crawler.core.enums import Category, PageOutcome
from hashlist_crawler.core.schema import ManifestEntry, MediaRecord, RawRecord


class TestManifestEntry:
    """Tests for ManifestEntry."""

    def test_from_item(self) -> None:
        """Test the path is read from a tree item."""
        assert ManifestEntry.from_item({"path": "a.html", "mode": "100644"}).path == "a.html"

    @pytest.mark.parametrize("item", [{}, {"path": None}, {"path": 3}, "a.html", None])
    def test_missing_path(self, item) -> None:
        """Test unusable items give an empty path."""
        assert ManifestEntry.from_item(item).path == ""


class TestRawRecord:
    """Tests for RawRecord."""

    def test_from_item(self) -> None:
        """Test payload keys map onto the model."""
        record = RawRecord.from_item({"filename": "a.mkv", "bytes": 10, "hash": "h", "extra": True})
        assert record is not None
        assert record.filename == "a.mkv"
        assert record.size == 10
        assert record.info_hash == "h"

    @pytest.mark.parametrize(
        "item",
        [
            {"bytes": 10, "hash": "h"},
            {"filename": "a.mkv", "hash": "h"},
            {"filename": "a.mkv", "bytes": 10},
            {"filename": "a.mkv", "bytes": "10", "hash": "h"},
            {"filename": 5, "bytes": 10, "hash": "h"},
            {"filename": "a.mkv", "bytes": 10, "hash": None},
            ["a.mkv", 10, "h"],
        ],
    )
    def test_invalid_items(self, item) -> None:
        """Test missing or mistyped fields are rejected."""
        assert RawRecord.from_item(item) is None

    def test_frozen(self) -> None:
        """Test records cannot be mutated."""
        record = RawRecord.from_item({"filename": "a.mkv", "bytes": 10, "hash": "h"})
        with pytest.raises(ValidationError):
            record.filename = "b.mkv"


class TestMediaRecord:
    """Tests for MediaRecord."""

    def test_defaults(self) -> None:
        """Test swarm counters default to zero."""
        record = MediaRecord(source="DMM", name="n", category=Category.TV, size="1", info_hash="h")
        assert record.seeders == 0
        assert record.leechers == 0

    def test_serialization_alias(self) -> None:
        """Test the info hash serializes as infoHash."""
        record = MediaRecord(source="DMM", name="n", category=Category.MOVIES, size="1", info_hash="h")
        assert record.model_dump(by_alias=True)["infoHash"] == "h"
        assert record.to_storage_dict()["category"] == "movies"


class TestPageOutcome:
    """Tests for PageOutcome."""

    def test_skipped(self) -> None:
        """Test only the skip outcomes report skipped."""
        skipped = {o for o in PageOutcome if o.skipped}
        assert skipped == {PageOutcome.SKIPPED_EMPTY_PATH, PageOutcome.SKIPPED_ALREADY_INGESTED}
