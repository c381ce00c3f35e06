"""
Crawl-layer exceptions.

Failures are classified where they happen: the page fetcher and the
extractor raise a subclass that tells the retry wrapper whether another
attempt can succeed.
"""

from __future__ import annotations


class ScrapeError(Exception):
    """Base exception for one page fetch or extraction."""


class TransientScrapeError(ScrapeError):
    """Raised for timeouts, connection errors and retryable HTTP statuses."""


class ExtractionError(TransientScrapeError):
    """Raised when a required field cannot be read from a loaded page."""


class PermanentScrapeError(ScrapeError):
    """Raised when repeating the request cannot change the outcome (404, 410, ...)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RetryExhaustedError(ScrapeError):
    """Raised when every attempt of a retried operation failed.

    Attributes:
        context: Human-readable label of the retried operation.
        attempts: Total number of attempts made.
        last_error: The exception raised by the final attempt.
    """

    def __init__(self, *, context: str, attempts: int, last_error: BaseException) -> None:
        self.context = context
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"{context} failed after {attempts} attempts: {last_error}")
