"""
Config-driven scraper implementation.
"""

from __future__ import annotations

from bs4 import BeautifulSoup

from prisbanditt.crawling.parsing import ProductPageParser
from prisbanditt.crawling.scrapers.base import RetailerScraper
from prisbanditt.crawling.types import ExtractedProduct

PRODUCT_FIELDS = ("name", "price", "brand", "image", "stock", "shipping")


class ConfigurableRetailerScraper(RetailerScraper):
    """
    Scraper that relies on field selectors from the retailer config.
    """

    def parse_product(self, *, soup: BeautifulSoup, page_url: str) -> ExtractedProduct:
        return ProductPageParser.parse_product(
            soup=soup,
            page_url=page_url,
            selectors={field: self.selectors_for(field) for field in PRODUCT_FIELDS},
        )

    def product_links(self, *, soup: BeautifulSoup, page_url: str) -> list[str]:
        return ProductPageParser.extract_product_links(
            soup=soup,
            page_url=page_url,
            selectors=self.selectors_for("product_links"),
        )

    def selectors_for(self, field: str) -> list[str]:
        return self.config.selectors.get(field.strip().lower(), [])
