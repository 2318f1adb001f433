"""Pydantic v2 models for hashlist manifests, raw records and persisted torrents."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from hashlist_crawler.core.enums import Category


class ManifestEntry(BaseModel):
    """One entry of the hashlist repository tree."""

    model_config = ConfigDict(extra="ignore")

    path: str = ""

    @classmethod
    def from_item(cls, item: Any) -> "ManifestEntry":
        """Build an entry from a raw tree item, tolerating missing or null paths."""
        if not isinstance(item, dict):
            return cls()
        path = item.get("path")
        return cls(path=path if isinstance(path, str) else "")


class RawRecord(BaseModel):
    """
    A single torrent row as decoded from a hashlist payload.

    The payload uses ``filename``, ``bytes`` and ``hash`` keys; any other keys
    are ignored.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    filename: StrictStr
    size: StrictInt = Field(alias="bytes")
    info_hash: StrictStr = Field(alias="hash")

    @classmethod
    def from_item(cls, item: Any) -> "RawRecord | None":
        """
        Validate a decoded JSON item.

        Returns:
            RawRecord, or None if a required field is missing or has the wrong type
        """
        if not isinstance(item, dict):
            return None
        try:
            return cls.model_validate(item)
        except ValidationError:
            return None


class MediaRecord(BaseModel):
    """Classified torrent ready to be handed to storage."""

    model_config = ConfigDict(frozen=True)

    source: str
    name: str
    category: Category
    size: str
    info_hash: str = Field(serialization_alias="infoHash")
    seeders: int = 0
    leechers: int = 0

    def to_storage_dict(self) -> dict[str, Any]:
        """Serialize to the persisted record shape."""
        return {
            "source": self.source,
            "name": self.name,
            "category": self.category.value,
            "size": self.size,
            "infoHash": self.info_hash,
            "seeders": self.seeders,
            "leechers": self.leechers,
        }
