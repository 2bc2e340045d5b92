"""Confluence client library for publishing page trees.

This package provides Python abstractions over the Confluence REST API:
an authenticated, rate-limited HTTP transport, a content client for pages,
attachments, properties and labels, and a typed exception hierarchy.
"""

from .errors import (
    SyncError,
    ConfluenceError,
    ConfigurationError,
    InvalidCredentialsError,
    NotFoundError,
    MultipleResultsError,
    RequestFailedError,
    PaginationLimitExceededError,
)

__all__ = [
    "SyncError",
    "ConfluenceError",
    "ConfigurationError",
    "InvalidCredentialsError",
    "NotFoundError",
    "MultipleResultsError",
    "RequestFailedError",
    "PaginationLimitExceededError",
]
