"""Content fingerprints stored as Confluence content properties."""

import hashlib
from typing import Union

# Content property holding the hash of the last published page body
CONTENT_HASH_PROPERTY_KEY = "content-hash"


def content_hash(content: Union[str, bytes]) -> str:
    """Return the SHA-256 hex digest of a page body or attachment content."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def attachment_hash_property_key(file_name: str) -> str:
    """Content property holding the hash of the last uploaded attachment content."""
    return f"{file_name}-hash"
