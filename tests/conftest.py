"""Root pytest configuration for all tests."""

import logging

import pytest

# Keep urllib3 connection chatter out of captured logs.
logging.getLogger("urllib3").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def no_confluence_env(monkeypatch):
    """Make sure no real Confluence credentials leak into unit tests."""
    for name in ("CONFLUENCE_URL", "CONFLUENCE_USER", "CONFLUENCE_API_TOKEN"):
        monkeypatch.delenv(name, raising=False)
