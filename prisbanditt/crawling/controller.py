"""
Polite crawl controller: robots.txt gate, rate limit and bounded retry.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar

from prisbanditt.crawling.activity_log import ActivityLogger
from prisbanditt.crawling.rate_limiter import RequestRateLimiter
from prisbanditt.crawling.retry import with_retry
from prisbanditt.crawling.robots import RobotsPolicyManager

T = TypeVar("T")


class PoliteCrawlController:
    """
    Decides whether a URL may be fetched and runs the fetch politely.

    Every attempt waits on the shared rate limiter before it starts, so no
    two attempts in a run start closer together than the effective minimum
    delay, retries included.
    """

    def __init__(
        self,
        *,
        robots_policy: RobotsPolicyManager,
        rate_limiter: RequestRateLimiter,
        activity_log: ActivityLogger,
        max_attempts: int = 3,
        retry_delay_seconds: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.robots_policy = robots_policy
        self.rate_limiter = rate_limiter
        self.activity_log = activity_log
        self._max_attempts = max(1, max_attempts)
        self._retry_delay_seconds = max(0.0, retry_delay_seconds)
        self._sleep = sleep

    def is_allowed(self, url: str) -> bool:
        rules = self.robots_policy.check(url)
        if rules.crawl_delay is not None and self.rate_limiter.raise_min_delay(rules.crawl_delay):
            self.activity_log.info(
                "robots.txt crawl-delay raised the request delay",
                url=url,
                crawl_delay_seconds=rules.crawl_delay,
            )
        if not rules.allowed:
            self.activity_log.warn("Skipping - disallowed by robots.txt", url=url)
            return False
        return True

    def fetch(self, url: str, operation: Callable[[], T], *, context: str) -> T | None:
        """
        Run `operation` for `url` under robots.txt, rate limit and retry policy.

        Returns None when robots.txt disallows the URL.
        """

        if not self.is_allowed(url):
            return None

        def attempt() -> T:
            waited = self.rate_limiter.acquire()
            if waited > 0:
                self.activity_log.info(
                    "Rate limiting: waited before request",
                    url=url,
                    waited_seconds=round(waited, 3),
                )
            return operation()

        return with_retry(
            attempt,
            context=context,
            activity_log=self.activity_log,
            max_attempts=self._max_attempts,
            base_delay_seconds=self._retry_delay_seconds,
            sleep=self._sleep,
        )
