"""Unit tests for publisher.hashing module."""

from src.publisher.hashing import (
    CONTENT_HASH_PROPERTY_KEY,
    attachment_hash_property_key,
    content_hash,
)


class TestHashing:
    """Test cases for content fingerprints."""

    def test_text_and_bytes_hash_alike(self):
        assert content_hash("<p>é</p>") == content_hash("<p>é</p>".encode("utf-8"))

    def test_known_digest(self):
        assert content_hash("") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

    def test_different_content_differs(self):
        assert content_hash("a") != content_hash("b")

    def test_property_keys(self):
        assert CONTENT_HASH_PROPERTY_KEY == "content-hash"
        assert attachment_hash_property_key("diagram.png") == "diagram.png-hash"
