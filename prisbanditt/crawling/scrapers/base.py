"""
Base scraper abstraction for retailer product pages.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timezone
from urllib.parse import urldefrag, urljoin

from bs4 import BeautifulSoup

from prisbanditt.crawling.config.models import CrawlSettings, RetailerConfig
from prisbanditt.crawling.controller import PoliteCrawlController
from prisbanditt.crawling.errors import ExtractionError
from prisbanditt.crawling.fetcher import PageFetcher
from prisbanditt.crawling.parsing import parse_price
from prisbanditt.crawling.types import ExtractedProduct, ScraperRunResult
from prisbanditt.domain.products import ScrapedRecord


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RetailerScraper(ABC):
    """
    Base class implementing product and category crawl orchestration.

    All page loads go through the crawl controller, so robots.txt, the
    run-wide rate limit and the retry budget apply to every request.
    """

    def __init__(
        self,
        *,
        config: RetailerConfig,
        settings: CrawlSettings,
        controller: PoliteCrawlController,
        fetcher: PageFetcher,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config = config
        self.settings = settings
        self.controller = controller
        self.fetcher = fetcher
        self.activity_log = controller.activity_log
        self._clock = clock

    def scrape_product(self, url: str) -> ScrapedRecord | None:
        """
        Scrape one product page. Returns None when robots.txt disallows it.

        Raises RetryExhaustedError or PermanentScrapeError when the page fails.
        """

        return self.controller.fetch(
            url,
            lambda: self._load_product(url),
            context=f"Scraping product page {url}",
        )

    def scrape_category(self, url: str, *, max_products: int | None = None) -> ScraperRunResult:
        """
        Scrape the product pages linked from a category page, in discovery order.

        A failing product page is logged and skipped; a failing category page
        propagates.
        """

        links = self.controller.fetch(
            url,
            lambda: self._load_category(url),
            context=f"Scraping category page {url}",
        )
        if links is None:
            return ScraperRunResult(
                retailer=self.config.slug,
                records=[],
                failed_pages=0,
                skipped_pages=1,
            )

        limit = max(1, max_products or self.settings.max_products)
        self.activity_log.info(
            "Found product links on category page",
            url=url,
            count=len(links),
            to_scrape=min(limit, len(links)),
        )

        records: list[ScrapedRecord] = []
        errors: list[str] = []
        failed_pages = 0
        skipped_pages = 0
        for link in links[:limit]:
            try:
                record = self.scrape_product(link)
            except Exception as exc:
                failed_pages += 1
                errors.append(f"url={link} error={exc}")
                self.activity_log.error("Failed to scrape product", url=link, error=str(exc))
                continue
            if record is None:
                skipped_pages += 1
                continue
            records.append(record)

        return ScraperRunResult(
            retailer=self.config.slug,
            records=records,
            failed_pages=failed_pages,
            errors=errors,
            skipped_pages=skipped_pages,
        )

    def normalize_url(self, url: str) -> str:
        absolute, _ = urldefrag(urljoin(f"{self.config.base_url}/", url))
        return absolute

    def build_record(self, *, extracted: ExtractedProduct, page_url: str) -> ScrapedRecord:
        if not extracted.name:
            raise ExtractionError("Could not extract product name")

        price = parse_price(extracted.price_text)
        if price is None:
            raise ExtractionError("Could not extract product price")

        return ScrapedRecord(
            name=extracted.name,
            price=price,
            source_url=self.normalize_url(page_url),
            retailer_id=self.config.slug,
            scraped_at=self._clock(),
            brand=extracted.brand,
            ean=extracted.ean,
            image_url=extracted.image_url,
            shipping_cost=parse_price(extracted.shipping_text),
            stock_status=extracted.stock_status or "unknown",
        )

    @abstractmethod
    def parse_product(self, *, soup: BeautifulSoup, page_url: str) -> ExtractedProduct:
        """
        Read raw product fields from a loaded product page.
        """

    @abstractmethod
    def product_links(self, *, soup: BeautifulSoup, page_url: str) -> list[str]:
        """
        Product page URLs linked from a category page, in document order.
        """

    def _load_product(self, url: str) -> ScrapedRecord:
        self.activity_log.info("Scraping product page", url=url)
        soup = BeautifulSoup(self.fetcher.fetch_html(url), "html.parser")
        record = self.build_record(
            extracted=self.parse_product(soup=soup, page_url=url),
            page_url=url,
        )
        self.activity_log.success(
            "Successfully scraped product",
            name=record.name,
            price=record.price,
            url=url,
        )
        return record

    def _load_category(self, url: str) -> list[str]:
        self.activity_log.info("Scraping category page", url=url)
        soup = BeautifulSoup(self.fetcher.fetch_html(url), "html.parser")
        return self.product_links(soup=soup, page_url=url)
