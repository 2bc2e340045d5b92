"""Test helper modules for publisher testing.

This package provides:
- fake_confluence: in-memory Confluence client that records its calls
"""

from .fake_confluence import FakeConfluence

__all__ = [
    'FakeConfluence',
]
