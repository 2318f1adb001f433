"""
Crawler Configuration Module
============================

Loads crawler settings from a YAML file, with environment overrides for
secrets. The hashlist source, HTTP client settings and title filters are all
configured here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_MANIFEST_URL = (
    "https://api.github.com/repos/debridmediamanager/hashlists/git/trees/main?recursive=1"
)
DEFAULT_DOWNLOAD_BASE_URL = "https://raw.githubusercontent.com/debridmediamanager/hashlists/main"


@dataclass
class HashlistConfig:
    """Where the hashlists live and how their torrents are tagged."""

    source: str = "DMM"
    manifest_url: str = DEFAULT_MANIFEST_URL
    download_base_url: str = DEFAULT_DOWNLOAD_BASE_URL

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> HashlistConfig:
        """Create from dictionary, using defaults for missing values."""
        if data is None:
            return cls()
        return cls(
            source=data.get("source", "DMM"),
            manifest_url=data.get("manifest_url", DEFAULT_MANIFEST_URL),
            download_base_url=data.get("download_base_url", DEFAULT_DOWNLOAD_BASE_URL).rstrip("/"),
        )

    def page_url(self, path: str) -> str:
        """Build the download URL for a manifest path."""
        return f"{self.download_base_url}/{path.lstrip('/')}"


@dataclass
class HttpConfig:
    """HTTP client settings."""

    user_agent: str = "curl"
    request_timeout: float = 30.0
    github_token: str | None = field(default=None, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> HttpConfig:
        """Create from dictionary."""
        if data is None:
            return cls()
        return cls(
            user_agent=data.get("user_agent", "curl"),
            request_timeout=float(data.get("request_timeout", 30.0)),
            github_token=data.get("github_token") or None,
        )


@dataclass
class FilterConfig:
    """Title filters applied during classification."""

    banned_terms: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> FilterConfig:
        """Create from dictionary."""
        if data is None:
            return cls()
        return cls(banned_terms=[str(t) for t in data.get("banned_terms", []) or []])


@dataclass
class CrawlerConfig:
    """Top-level crawler configuration."""

    hashlist: HashlistConfig = field(default_factory=HashlistConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    filters: FilterConfig = field(default_factory=FilterConfig)
    concurrency: int = 1
    fail_fast: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> CrawlerConfig:
        """Create from dictionary."""
        if data is None:
            return cls()
        concurrency = int(data.get("concurrency", 1))
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        return cls(
            hashlist=HashlistConfig.from_dict(data.get("hashlist")),
            http=HttpConfig.from_dict(data.get("http")),
            filters=FilterConfig.from_dict(data.get("filters")),
            concurrency=concurrency,
            fail_fast=bool(data.get("fail_fast", False)),
        )

    @classmethod
    def load(cls, config_path: Path | str) -> CrawlerConfig:
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the crawler.yaml file

        Returns:
            Parsed configuration with environment overrides applied
        """
        config_path = Path(config_path).expanduser().resolve()
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        config = cls.from_dict(data)
        config.apply_env()
        return config

    def apply_env(self) -> None:
        """Apply environment variable overrides."""
        token = os.environ.get("GITHUB_PAT")
        if token:
            self.http.github_token = token


# Global config instance
_default_config: CrawlerConfig | None = None


def get_default_config() -> CrawlerConfig:
    """
    Get the default crawler configuration.

    Loads configuration from the path specified in HASHLIST_CONFIG_PATH
    environment variable, or falls back to config/crawler.yaml.

    Returns:
        The global CrawlerConfig instance
    """
    global _default_config

    if _default_config is None:
        config_path = os.environ.get("HASHLIST_CONFIG_PATH")
        if config_path:
            path = Path(config_path)
        else:
            project_root = Path(__file__).parent.parent.parent
            path = project_root / "config" / "crawler.yaml"

        if path.exists():
            _default_config = CrawlerConfig.load(path)
        else:
            _default_config = CrawlerConfig()
            _default_config.apply_env()

    return _default_config


def reset_default_config() -> None:
    """Reset the default config (useful for testing)."""
    global _default_config
    _default_config = None
