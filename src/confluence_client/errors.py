"""Typed exception hierarchy for Confluence-related errors.

This module defines all custom exceptions used by the Confluence client library.
All exceptions inherit from ConfluenceError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional


class SyncError(Exception):
    """Base exception for all confluence-publish errors.

    Use this to catch any application-level error from the publish tool.
    """
    pass


class ConfluenceError(SyncError):
    """Base exception for all Confluence-related errors."""
    pass


class ConfigurationError(ConfluenceError):
    """Raised when a client component is constructed with invalid arguments."""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidCredentialsError(ConfluenceError):
    """Raised when API credentials are missing from the environment."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"API credentials are incomplete (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class NotFoundError(ConfluenceError):
    """Raised when a uniqueness-constrained lookup returns no result."""

    def __init__(self, lookup_key: str):
        super().__init__(f"No result found for {lookup_key}")
        self.lookup_key = lookup_key


class MultipleResultsError(ConfluenceError):
    """Raised when a uniqueness-constrained lookup returns more than one result.

    This indicates duplicated content in the remote space and is never
    resolved automatically.
    """

    def __init__(self, lookup_key: str, count: int):
        super().__init__(
            f"Expected exactly one result for {lookup_key}, but got {count}"
        )
        self.lookup_key = lookup_key
        self.count = count


class RequestFailedError(ConfluenceError):
    """Raised when a request fails at transport level or returns a bad status.

    Attributes:
        method: HTTP method of the failed request
        url: Absolute URL of the failed request
        status_code: HTTP status code (None for transport failures)
        reason: HTTP reason phrase (if any)
        response_body: Response body snippet (if any)
        cause: Underlying exception for transport failures
    """

    def __init__(
        self,
        method: str,
        url: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        response_body: Optional[str] = None,
        cause: Optional[BaseException] = None,
        detail: Optional[str] = None,
    ):
        request = f"{method} {url}"
        if status_code is None:
            message = f"request '{request}' could not be sent"
            if detail is None and cause is not None:
                detail = str(cause)
            if detail:
                message += f": {detail}"
        else:
            message = f"request '{request}' failed with response {status_code}"
            if reason:
                message += f" {reason}"
            if response_body:
                message += f" and response body '{response_body}'"
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.reason = reason
        self.response_body = response_body
        self.cause = cause


class PaginationLimitExceededError(ConfluenceError):
    """Raised when a paginated listing never reports a short batch."""

    def __init__(self, path: str, max_requests: int):
        super().__init__(
            f"Listing {path} did not end after {max_requests} requests"
        )
        self.path = path
        self.max_requests = max_requests
