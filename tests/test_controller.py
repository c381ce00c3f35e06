"""
tests/test_controller.py

Robots gate, crawl-delay propagation and per-attempt rate limiting.
"""

from __future__ import annotations

import pytest

from prisbanditt.crawling.activity_log import ActivityLevel, ActivityLogger, MemoryActivitySink
from prisbanditt.crawling.controller import PoliteCrawlController
from prisbanditt.crawling.errors import RetryExhaustedError, TransientScrapeError
from prisbanditt.crawling.rate_limiter import RequestRateLimiter
from prisbanditt.crawling.robots import RobotsPolicyManager
from tests.fakes import BOT_NAME, FakeClock, FakeResponse, FakeSession

ROBOTS_URL = "https://shop.example/robots.txt"


def build_controller(
    robots_text: str,
    activity_log: ActivityLogger,
    clock: FakeClock,
    *,
    min_delay: float = 3.0,
) -> PoliteCrawlController:
    session = FakeSession(routes={ROBOTS_URL: FakeResponse(text=robots_text)})
    return PoliteCrawlController(
        robots_policy=RobotsPolicyManager(
            session=session,
            bot_name=BOT_NAME,
            activity_log=activity_log,
        ),
        rate_limiter=RequestRateLimiter(
            min_delay_seconds=min_delay,
            clock=clock,
            sleep=clock.sleep,
        ),
        activity_log=activity_log,
        max_attempts=3,
        retry_delay_seconds=1.0,
        sleep=clock.sleep,
    )


def test_disallowed_url_is_skipped_without_fetching(
    activity_log: ActivityLogger,
    memory_sink: MemoryActivitySink,
    fake_clock: FakeClock,
) -> None:
    controller = build_controller("User-agent: *\nDisallow: /admin\n", activity_log, fake_clock)
    calls: list[str] = []

    result = controller.fetch("https://shop.example/admin/x", lambda: calls.append("x"), context="op")

    assert result is None
    assert calls == []
    assert memory_sink.actions(ActivityLevel.WARN) == ["Skipping - disallowed by robots.txt"]


def test_crawl_delay_raises_rate_limit(
    activity_log: ActivityLogger,
    fake_clock: FakeClock,
) -> None:
    controller = build_controller("User-agent: *\nCrawl-delay: 10\n", activity_log, fake_clock)

    controller.fetch("https://shop.example/p/1", lambda: "a", context="op")
    controller.fetch("https://shop.example/p/2", lambda: "b", context="op")

    assert controller.rate_limiter.min_delay_seconds == 10.0
    assert fake_clock.sleeps == [10.0]


def test_smaller_crawl_delay_keeps_configured_floor(
    activity_log: ActivityLogger,
    fake_clock: FakeClock,
) -> None:
    controller = build_controller("User-agent: *\nCrawl-delay: 1\n", activity_log, fake_clock)

    assert controller.is_allowed("https://shop.example/p/1") is True
    assert controller.rate_limiter.min_delay_seconds == 3.0


def test_every_attempt_waits_on_rate_limiter(
    activity_log: ActivityLogger,
    memory_sink: MemoryActivitySink,
    fake_clock: FakeClock,
) -> None:
    controller = build_controller("", activity_log, fake_clock, min_delay=3.0)
    starts: list[float] = []

    def always_fails() -> str:
        starts.append(fake_clock.now)
        raise TransientScrapeError("timeout")

    with pytest.raises(RetryExhaustedError):
        controller.fetch("https://shop.example/p/1", always_fails, context="op")

    assert len(starts) == 3
    assert all(later - earlier >= 3.0 for earlier, later in zip(starts, starts[1:]))
    assert "Rate limiting: waited before request" in memory_sink.actions(ActivityLevel.INFO)
