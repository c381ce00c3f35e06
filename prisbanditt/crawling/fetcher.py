"""
HTTP page loader with failure classification.
"""

from __future__ import annotations

from collections.abc import Mapping

import requests

from prisbanditt.crawling.errors import PermanentScrapeError, TransientScrapeError

RETRYABLE_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}
ACCEPT_LANGUAGE = "nb-NO,nb;q=0.9,no;q=0.8,nn;q=0.7,en-US;q=0.6,en;q=0.5"


def build_request_headers(*, bot_name: str, contact_email: str) -> dict[str, str]:
    """
    Headers identifying the crawler as a bot with a contact address.
    """

    return {
        "User-Agent": f"{bot_name} (+{contact_email})",
        "Accept-Language": ACCEPT_LANGUAGE,
    }


class PageFetcher:
    """
    Loads pages through a shared session with a hard timeout per request.
    """

    def __init__(
        self,
        *,
        session: requests.Session,
        headers: Mapping[str, str],
        timeout_seconds: float,
    ) -> None:
        self._session = session
        self._headers = dict(headers)
        self._timeout_seconds = timeout_seconds

    def fetch_html(self, url: str) -> str:
        try:
            response = self._session.get(
                url,
                headers=self._headers,
                timeout=self._timeout_seconds,
                allow_redirects=True,
            )
        except requests.Timeout as exc:
            raise TransientScrapeError(
                f"Timed out after {self._timeout_seconds}s loading {url}"
            ) from exc
        except requests.RequestException as exc:
            raise TransientScrapeError(f"Request failed for {url}: {exc}") from exc

        status_code = response.status_code
        if status_code in RETRYABLE_STATUS_CODES:
            raise TransientScrapeError(f"Retryable status={status_code} url={url}")
        if status_code >= 400:
            raise PermanentScrapeError(
                f"Non-retryable status={status_code} url={url}",
                status_code=status_code,
            )
        return response.text
