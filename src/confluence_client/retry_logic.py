"""Retry logic with exponential backoff for Confluence API rate limits.

This module provides retry functionality specifically for handling 429 rate limit
responses from the Confluence API. It implements exponential backoff (1s, 2s, 4s)
and fails fast for every other error, including version conflicts.
"""

import time
import logging
from typing import Callable, TypeVar

from .errors import RequestFailedError

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_MAX_RETRIES = 3


def retry_on_rate_limit(
    func: Callable[..., T],
    *args,
    max_retries: int = DEFAULT_MAX_RETRIES,
    **kwargs
) -> T:
    """Retry function on 429 rate limit with exponential backoff.

    Executes the given function with the provided arguments, retrying up to
    max_retries times with exponential backoff (1s, 2s, 4s) when a rate limit
    error is encountered. Fails fast for all other errors.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        max_retries: Number of retries after the first attempt (0 disables retries)
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        RequestFailedError: The last rate limit error once retries are exhausted
        Other exceptions: Passed through immediately without retry

    Example:
        >>> result = retry_on_rate_limit(transport._send_once, "GET", "/rest/api/space")
    """
    for retry_num in range(max_retries + 1):
        try:
            return func(*args, **kwargs)
        except RequestFailedError as e:
            if not _is_rate_limit_error(e):
                raise

            if retry_num >= max_retries:
                logger.error(
                    f"Rate limit persisted after {max_retries} retries, giving up"
                )
                raise

            # 1s, 2s, 4s
            wait_time = 2 ** retry_num
            logger.warning(
                f"Rate limit hit, retrying in {wait_time}s "
                f"(retry {retry_num + 1}/{max_retries})"
            )
            time.sleep(wait_time)

    # Unreachable: the loop either returns or raises
    raise AssertionError("retry loop exited without result")


def _is_rate_limit_error(exception: Exception) -> bool:
    """Check if an exception represents a rate limit (429) error.

    Args:
        exception: The exception to check

    Returns:
        True if the request was rejected with HTTP 429, False otherwise
    """
    return getattr(exception, 'status_code', None) == 429
