"""Typed exception hierarchy for publisher errors.

This module defines all custom exceptions used by the publisher.
All exceptions inherit from PublisherError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional, Sequence

from src.confluence_client.errors import SyncError


class PublisherError(SyncError):
    """Base exception for all publisher errors."""
    pass


class FilesystemError(PublisherError):
    """Raised when filesystem operations fail (read, permissions, etc)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class PublishConfigError(PublisherError):
    """Raised when publish configuration validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class ContentModelError(PublisherError):
    """Raised when the content model file describes an invalid page tree."""

    def __init__(self, model_path: str, message: str, location: Optional[str] = None):
        where = f" at {location}" if location else ""
        super().__init__(f"Invalid content model {model_path}{where}: {message}")
        self.model_path = model_path
        self.location = location
        self.message = message


class PublishError(PublisherError):
    """Raised when publishing a page subtree fails.

    Carries the title path of the failing page and, once known, its content
    id. The Confluence error that caused the failure is kept in ``cause``.

    Attributes:
        page_path: Titles from the top-level page down to the failing page
        content_id: Content id of the failing page (None before it exists)
        cause: Underlying Confluence error
    """

    def __init__(
        self,
        page_path: Sequence[str],
        content_id: Optional[str],
        cause: Exception,
    ):
        path = " / ".join(page_path)
        target = f"'{path}'"
        if content_id:
            target += f" (content id {content_id})"
        super().__init__(f"Publishing page {target} failed: {cause}")
        self.page_path = tuple(page_path)
        self.content_id = content_id
        self.cause = cause
