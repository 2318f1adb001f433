"""Shared fixtures for the hashlist crawler tests."""

import tempfile
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from hashlist_crawler.db.models import Base
from hashlist_crawler.ingestion.classifier import RecordClassifier
from hashlist_crawler.ingestion.config import reset_default_config

from fakes import InMemoryStorage, KeywordClassificationService


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    """Keep the global config and secrets out of tests."""
    monkeypatch.delenv("GITHUB_PAT", raising=False)
    monkeypatch.delenv("HASHLIST_CONFIG_PATH", raising=False)
    reset_default_config()
    yield
    reset_default_config()


@pytest.fixture
def storage() -> InMemoryStorage:
    """Empty in-memory storage."""
    return InMemoryStorage()


@pytest.fixture
def classifier() -> RecordClassifier:
    """Record classifier using keyword classification."""
    return RecordClassifier(KeywordClassificationService(), source="DMM")


@pytest.fixture
def session_factory():
    """Session factory bound to a temporary SQLite database."""
    with tempfile.TemporaryDirectory() as tmpdir:
        engine = create_engine(f"sqlite:///{Path(tmpdir) / 'test_hashlist.db'}", echo=False)
        Base.metadata.create_all(engine)
        yield sessionmaker(bind=engine)
        engine.dispose()
