"""
tests/test_fetcher.py
"""

from __future__ import annotations

import pytest
import requests

from prisbanditt.crawling.errors import PermanentScrapeError, TransientScrapeError
from prisbanditt.crawling.fetcher import ACCEPT_LANGUAGE, PageFetcher, build_request_headers
from tests.fakes import BOT_NAME, CONTACT_EMAIL, FakeResponse, FakeSession

URL = "https://shop.example/p/1"


def make_fetcher(route) -> tuple[PageFetcher, FakeSession]:
    session = FakeSession(routes={URL: route})
    fetcher = PageFetcher(
        session=session,
        headers=build_request_headers(bot_name=BOT_NAME, contact_email=CONTACT_EMAIL),
        timeout_seconds=30.0,
    )
    return fetcher, session


def test_headers_identify_bot_and_contact() -> None:
    headers = build_request_headers(bot_name=BOT_NAME, contact_email=CONTACT_EMAIL)

    assert headers["User-Agent"] == "PrisBanditt-Bot/1.0 (+crawler@example.com)"
    assert headers["Accept-Language"] == ACCEPT_LANGUAGE


def test_returns_html_and_sends_timeout() -> None:
    fetcher, session = make_fetcher(FakeResponse(text="<html>ok</html>"))

    assert fetcher.fetch_html(URL) == "<html>ok</html>"
    assert session.requests[0]["timeout"] == 30.0
    assert session.requests[0]["headers"]["User-Agent"].startswith("PrisBanditt-Bot/1.0")


@pytest.mark.parametrize("status_code", [429, 500, 503])
def test_retryable_statuses_are_transient(status_code: int) -> None:
    fetcher, _ = make_fetcher(FakeResponse(status_code=status_code))

    with pytest.raises(TransientScrapeError):
        fetcher.fetch_html(URL)


@pytest.mark.parametrize("status_code", [403, 404, 410])
def test_other_client_errors_are_permanent(status_code: int) -> None:
    fetcher, _ = make_fetcher(FakeResponse(status_code=status_code))

    with pytest.raises(PermanentScrapeError) as exc_info:
        fetcher.fetch_html(URL)
    assert exc_info.value.status_code == status_code


def test_timeout_is_transient() -> None:
    fetcher, _ = make_fetcher(requests.Timeout("read timed out"))

    with pytest.raises(TransientScrapeError, match="Timed out after 30.0s"):
        fetcher.fetch_html(URL)


def test_connection_error_is_transient() -> None:
    fetcher, _ = make_fetcher(requests.ConnectionError("reset"))

    with pytest.raises(TransientScrapeError, match="Request failed"):
        fetcher.fetch_html(URL)
