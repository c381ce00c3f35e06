"""
Run-wide request rate limiter.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable


class RequestRateLimiter:
    """
    Enforces a minimum interval between the starts of consecutive requests.

    The interval is global to the run, not per domain. It starts at the
    configured delay and can only be raised (by robots.txt crawl delays).
    """

    def __init__(
        self,
        *,
        min_delay_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._min_delay_seconds = max(0.0, min_delay_seconds)
        self._clock = clock
        self._sleep = sleep
        self._last_request_at: float | None = None
        self._lock = threading.Lock()

    @property
    def min_delay_seconds(self) -> float:
        return self._min_delay_seconds

    def raise_min_delay(self, seconds: float) -> bool:
        """
        Raise the minimum delay to `seconds` if larger. Returns True when raised.
        """

        with self._lock:
            if seconds <= self._min_delay_seconds:
                return False
            self._min_delay_seconds = seconds
            return True

    def acquire(self) -> float:
        """
        Block until the minimum delay since the previous request has passed.

        Returns the number of seconds slept.
        """

        with self._lock:
            waited = 0.0
            if self._last_request_at is not None:
                elapsed = self._clock() - self._last_request_at
                wait_seconds = self._min_delay_seconds - elapsed
                if wait_seconds > 0:
                    self._sleep(wait_seconds)
                    waited = wait_seconds
            self._last_request_at = self._clock()
            return waited
