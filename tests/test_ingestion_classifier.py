"""Tests for the record classifier module."""

import logging

import pytest

from hashlist_crawler.core.enums import Category, TorrentType
from hashlist_crawler.core.schema import RawRecord
from hashlist_crawler.ingestion.classifier import PttClassificationService, RecordClassifier

from fakes import KeywordClassificationService


class TestRecordClassifier:
    """Tests for RecordClassifier with deterministic classification."""

    def test_movie(self, classifier: RecordClassifier) -> None:
        """Test a movie title produces a movies record."""
        record = classifier.classify({"filename": "Movie.Title.2020.mkv", "bytes": 12345, "hash": "abc123"})

        assert record is not None
        assert record.to_storage_dict() == {
            "source": "DMM",
            "name": "Movie.Title.2020.mkv",
            "category": "movies",
            "size": "12345",
            "infoHash": "abc123",
            "seeders": 0,
            "leechers": 0,
        }

    def test_tv(self, classifier: RecordClassifier) -> None:
        """Test a TV episode produces a tv record."""
        record = classifier.classify({"filename": "Show.S01E02.720p.mkv", "bytes": 1, "hash": "h"})
        assert record is not None
        assert record.category == Category.TV

    def test_unknown_type(self, classifier: RecordClassifier) -> None:
        """Test unrecognised titles produce no record."""
        assert classifier.classify({"filename": "notes.txt", "bytes": 1, "hash": "h"}) is None

    @pytest.mark.parametrize("missing", ["filename", "bytes", "hash"])
    def test_missing_field(self, classifier: RecordClassifier, missing: str) -> None:
        """Test rows missing a required field are dropped."""
        item = {"filename": "Movie.Title.2020.mkv", "bytes": 1, "hash": "h"}
        del item[missing]
        assert classifier.classify(item) is None

    def test_empty_filename(self, classifier: RecordClassifier) -> None:
        """Test an empty filename is dropped."""
        assert classifier.classify({"filename": "", "bytes": 1, "hash": "h"}) is None

    def test_non_integer_bytes(self, classifier: RecordClassifier) -> None:
        """Test a size that is not an integer drops the row instead of raising."""
        assert classifier.classify({"filename": "Movie.2020.mkv", "bytes": "12", "hash": "h"}) is None
        assert classifier.classify({"filename": "Movie.2020.mkv", "bytes": 1.5, "hash": "h"}) is None

    def test_banned_terms_logged_with_hash(
        self, classifier: RecordClassifier, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test banned titles are rejected and logged with their info hash."""
        with caplog.at_level(logging.WARNING):
            record = classifier.classify({"filename": "Movie.BANNED.2020.mkv", "bytes": 1, "hash": "feed01"})

        assert record is None
        assert "feed01" in caplog.text

    def test_source_tag(self) -> None:
        """Test the configured source tag is applied."""
        classifier = RecordClassifier(KeywordClassificationService(), source="HASHLIST")
        record = classifier.classify({"filename": "Movie.2020.mkv", "bytes": 1, "hash": "h"})
        assert record is not None
        assert record.source == "HASHLIST"

    def test_accepts_raw_record(self, classifier: RecordClassifier) -> None:
        """Test already validated RawRecords are accepted."""
        raw = RawRecord(filename="Movie.2020.mkv", bytes=10, hash="h")
        record = classifier.classify(raw)
        assert record is not None
        assert record.size == "10"

    def test_classify_many_keeps_order(self, classifier: RecordClassifier) -> None:
        """Test classify_many keeps accepted rows in input order."""
        records = classifier.classify_many(
            [
                {"filename": "Show.S01E01.mkv", "bytes": 1, "hash": "a"},
                {"filename": "junk", "bytes": 1, "hash": "b"},
                {"filename": "Movie.2020.mkv", "bytes": 1, "hash": "c"},
            ]
        )
        assert [r.info_hash for r in records] == ["a", "c"]


class TestPttClassificationService:
    """Tests for PTT-backed title classification."""

    @pytest.fixture
    def service(self) -> PttClassificationService:
        return PttClassificationService(banned_terms=["xxx", "adult only"])

    def test_movie(self, service: PttClassificationService) -> None:
        """Test a release with a year and no episode numbering is a movie."""
        assert service.classify_title("Movie.Title.2020.1080p.BluRay.x264-GROUP.mkv") == TorrentType.MOVIE

    def test_tv(self, service: PttClassificationService) -> None:
        """Test a release with season and episode numbers is TV."""
        assert service.classify_title("Show.Name.S01E02.720p.HDTV.x264-GROUP.mkv") == TorrentType.TV

    def test_unknown(self, service: PttClassificationService) -> None:
        """Test a title with neither year nor episode numbering is unknown."""
        assert service.classify_title("random_notes.txt") == TorrentType.UNKNOWN

    def test_blank(self, service: PttClassificationService) -> None:
        """Test blank titles are unknown."""
        assert service.classify_title("   ") == TorrentType.UNKNOWN

    def test_banned_term_whole_word(self, service: PttClassificationService) -> None:
        """Test banned terms match between release-name separators."""
        assert service.contains_banned_terms("Some.Movie.2020.XXX.1080p") is True
        assert service.contains_banned_terms("Some_Movie_xxx_2020") is True

    def test_banned_term_inside_word(self, service: PttClassificationService) -> None:
        """Test banned terms inside a longer word do not match."""
        assert service.contains_banned_terms("Xxxenia.2020.1080p") is False

    def test_banned_phrase(self, service: PttClassificationService) -> None:
        """Test multi-word banned phrases match."""
        assert service.contains_banned_terms("Adult Only Movie 2020") is True

    def test_no_banned_terms(self) -> None:
        """Test an empty banned list never matches."""
        assert PttClassificationService().contains_banned_terms("Anything.XXX") is False
