"""
Payload Codec Module
====================

Pulls the encoded torrent batch out of a hashlist page and decodes it.

Each hashlist page wraps its payload in an iframe pointing at the Debrid Media
Manager viewer; the URL fragment is an lz-string blob compressed with
``compressToEncodedURIComponent`` that expands to a JSON array of torrents.
"""

from __future__ import annotations

import json
import re
from typing import Any

from lzstring import LZString

from hashlist_crawler.ingestion.errors import PayloadDecodeError

HASHLIST_HOST = "debridmediamanager.com"

HASH_COLLECTION_PATTERN = re.compile(
    r'<iframe src="https://' + re.escape(HASHLIST_HOST) + r'/hashlist#([^"]*)"></iframe>'
)

_lz = LZString()


def extract_encoded_payload(page_content: str) -> str | None:
    """
    Find the encoded payload embedded in a hashlist page.

    Only the first iframe marker is considered.

    Args:
        page_content: Raw page markup

    Returns:
        The captured payload (possibly empty), or None if the marker is absent
    """
    match = HASH_COLLECTION_PATTERN.search(page_content)
    if match is None:
        return None
    return match.group(1)


def decompress_payload(encoded: str) -> str:
    """
    Expand an lz-string URI-component blob into text.

    Raises:
        PayloadDecodeError: If the blob is not valid lz-string data
    """
    try:
        decoded = _lz.decompressFromEncodedURIComponent(encoded)
    except Exception as e:
        # The decompressor fails with assorted internal errors on corrupt input
        raise PayloadDecodeError(f"Invalid lz-string payload: {e}") from e

    if not decoded:
        raise PayloadDecodeError("Payload decompressed to nothing")
    return decoded


def decode_payload(encoded: str) -> list[dict[str, Any]]:
    """
    Decode an extracted payload into raw torrent items.

    Args:
        encoded: Payload captured by extract_encoded_payload

    Returns:
        List of decoded JSON objects; non-object array members are dropped

    Raises:
        PayloadDecodeError: If the payload cannot be decompressed, is not JSON,
            or is not a JSON array
    """
    text = decompress_payload(encoded)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PayloadDecodeError(f"Payload is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise PayloadDecodeError(f"Expected a JSON array, got {type(data).__name__}")

    return [item for item in data if isinstance(item, dict)]


def encode_payload(items: list[dict[str, Any]]) -> str:
    """Encode torrent items the way hashlist pages embed them."""
    return _lz.compressToEncodedURIComponent(json.dumps(items))


def render_hashlist_page(encoded: str) -> str:
    """Wrap an encoded payload in the hashlist page iframe markup."""
    return f'<iframe src="https://{HASHLIST_HOST}/hashlist#{encoded}"></iframe>'
