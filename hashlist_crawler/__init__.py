"""Hashlist Crawler - ingests Debrid Media Manager hashlist pages into a torrent store."""

__version__ = "0.1.0"
