"""
Price crawl engine.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

import requests

from prisbanditt.crawling.activity_log import ActivityLogger
from prisbanditt.crawling.config import load_retailer_configs
from prisbanditt.crawling.config.models import CrawlSettings, RetailerConfig
from prisbanditt.crawling.controller import PoliteCrawlController
from prisbanditt.crawling.fetcher import PageFetcher, build_request_headers
from prisbanditt.crawling.rate_limiter import RequestRateLimiter
from prisbanditt.crawling.registry import ScraperRegistry
from prisbanditt.crawling.robots import RobotsPolicyManager
from prisbanditt.crawling.types import ScraperRunResult

logger = logging.getLogger(__name__)


class PriceCrawlEngine:
    """
    Wires the polite crawl components for one run and owns its HTTP session.
    """

    def __init__(
        self,
        *,
        settings: CrawlSettings,
        activity_log: ActivityLogger,
        registry: ScraperRegistry | None = None,
        retailer_configs: Sequence[RetailerConfig] | None = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._activity_log = activity_log
        self._registry = registry or ScraperRegistry()
        self._retailer_configs = list(retailer_configs) if retailer_configs is not None else None
        self._session_factory = session_factory
        self._clock = clock
        self._sleep = sleep

    def run(
        self,
        url: str,
        *,
        category: bool = False,
        max_products: int | None = None,
    ) -> ScraperRunResult:
        configs = self._retailer_configs
        if configs is None:
            configs = load_retailer_configs(config_path=self._settings.retailer_config_path)
        retailer = self._registry.resolve_retailer(url, configs)

        headers = {
            **build_request_headers(
                bot_name=self._settings.bot_name,
                contact_email=self._settings.contact_email,
            ),
            **retailer.headers,
        }
        self._activity_log.info(
            "Crawl configuration loaded",
            retailer=retailer.slug,
            request_delay_seconds=self._settings.request_delay_seconds,
            respect_robots_txt=self._settings.respect_robots_txt,
            max_attempts=self._settings.max_attempts,
            user_agent=headers["User-Agent"],
        )

        session = self._session_factory()
        try:
            controller = PoliteCrawlController(
                robots_policy=RobotsPolicyManager(
                    session=session,
                    bot_name=self._settings.bot_name,
                    activity_log=self._activity_log,
                    timeout_seconds=self._settings.robots_timeout_seconds,
                    headers=headers,
                    enabled=self._settings.respect_robots_txt,
                ),
                rate_limiter=RequestRateLimiter(
                    min_delay_seconds=self._settings.request_delay_seconds,
                    clock=self._clock,
                    sleep=self._sleep,
                ),
                activity_log=self._activity_log,
                max_attempts=self._settings.max_attempts,
                retry_delay_seconds=self._settings.retry_delay_seconds,
                sleep=self._sleep,
            )
            scraper = self._registry.create_scraper(
                config=retailer,
                settings=self._settings,
                controller=controller,
                fetcher=PageFetcher(
                    session=session,
                    headers=headers,
                    timeout_seconds=self._settings.timeout_seconds,
                ),
            )

            if category:
                return scraper.scrape_category(url, max_products=max_products)

            record = scraper.scrape_product(url)
            return ScraperRunResult(
                retailer=retailer.slug,
                records=[record] if record is not None else [],
                failed_pages=0,
                skipped_pages=0 if record is not None else 1,
            )
        finally:
            session.close()
            logger.debug("Crawl HTTP session closed for %s", url)
