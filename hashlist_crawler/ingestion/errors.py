"""Exceptions raised by the hashlist ingestion pipeline."""


class HashlistError(Exception):
    """Base class for hashlist ingestion errors."""


class ManifestError(HashlistError):
    """The manifest document could not be interpreted."""


class PayloadDecodeError(HashlistError):
    """An extracted payload could not be decompressed or parsed."""

    def __init__(self, message: str, page: str | None = None) -> None:
        super().__init__(message)
        self.page = page
