"""
Bounded retry with linear backoff for page fetch and extraction.

Retries every failure except `PermanentScrapeError`, which is re-raised
immediately. Each failed attempt is written to the activity log.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar

from prisbanditt.crawling.activity_log import ActivityLogger
from prisbanditt.crawling.errors import PermanentScrapeError, RetryExhaustedError

T = TypeVar("T")


def with_retry(
    operation: Callable[[], T],
    *,
    context: str,
    activity_log: ActivityLogger,
    max_attempts: int = 3,
    base_delay_seconds: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation`` up to ``max_attempts`` times.

    Args:
        operation: Zero-argument callable performing one attempt.
        context: Label used in log entries and in the final error.
        activity_log: Run activity logger.
        max_attempts: Total attempt budget (at least 1).
        base_delay_seconds: Wait after attempt ``n`` is ``base_delay_seconds * n``.
        sleep: Injected sleep function.

    Returns:
        The first successful result.

    Raises:
        PermanentScrapeError: Raised by an attempt; not retried.
        RetryExhaustedError: If every attempt failed.
    """

    attempts = max(1, max_attempts)
    attempt = 1

    while True:
        try:
            return operation()
        except PermanentScrapeError as exc:
            activity_log.error(
                f"{context} - permanent failure, not retrying",
                attempt=attempt,
                error=str(exc),
                status_code=exc.status_code,
            )
            raise
        except Exception as exc:
            activity_log.error(
                f"{context} - Attempt {attempt}/{attempts} failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            if attempt >= attempts:
                activity_log.error(
                    f"{context} failed after all retries",
                    attempts=attempts,
                    error=str(exc),
                )
                raise RetryExhaustedError(context=context, attempts=attempts, last_error=exc) from exc

        delay = base_delay_seconds * attempt
        activity_log.info("Retrying after backoff", context=context, delay_seconds=delay)
        sleep(delay)
        attempt += 1
