"""Minimum-interval gate shared by all requests sent to one Confluence instance."""

import logging
import threading
import time
from typing import Callable, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class RequestGate:
    """Blocks callers until a minimum interval has passed since the last request.

    The gate tracks when the previous request started. Share one instance
    between transports to serialize every call made against the same
    service. The clock and sleep functions are injectable for tests.

    Example:
        >>> gate = RequestGate(0.5)
        >>> gate.wait()  # returns immediately
        >>> gate.wait()  # sleeps until 0.5s after the previous call
    """

    def __init__(
        self,
        min_interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if min_interval_seconds is None or min_interval_seconds < 0:
            raise ConfigurationError(
                f"min_interval_seconds must be a non-negative number, got {min_interval_seconds}"
            )
        self.min_interval_seconds = float(min_interval_seconds)
        self._clock = clock
        self._sleep = sleep
        self._last_request_start: Optional[float] = None
        # Held across check, sleep and update
        self._lock = threading.Lock()

    def wait(self) -> float:
        """Wait for the interval to elapse and mark the start of a new request.

        Returns:
            Number of seconds slept (0.0 when no wait was needed)
        """
        with self._lock:
            slept = 0.0
            if self._last_request_start is not None and self.min_interval_seconds > 0:
                elapsed = self._clock() - self._last_request_start
                remaining = self.min_interval_seconds - elapsed
                if remaining > 0:
                    logger.debug(f"Rate limit: sleeping {remaining:.3f}s before next request")
                    self._sleep(remaining)
                    slept = remaining
            self._last_request_start = self._clock()
            return slept
