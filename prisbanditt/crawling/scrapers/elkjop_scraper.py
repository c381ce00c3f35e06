"""
Elkjøp scraper with default selectors for its product page markup.
"""

from __future__ import annotations

from prisbanditt.crawling.scrapers.configurable_scraper import ConfigurableRetailerScraper


class ElkjopScraper(ConfigurableRetailerScraper):
    """
    Retailer-specific scraper subclass for elkjop.no.
    """

    DEFAULT_SELECTORS: dict[str, list[str]] = {
        "name": [
            'h1[data-testid="product-title"]',
            'h1[class*="product-title"]',
        ],
        "price": [
            '[data-testid="product-price"]',
            '[class*="price"]',
        ],
        "brand": [
            '[data-testid="product-brand"]',
            '[itemprop="brand"]',
            '[class*="brand"]',
        ],
        "image": [
            'img[data-testid="product-image"]',
            'img[class*="product-image"]',
        ],
        "stock": [
            '[data-testid="stock-status"]',
            '[class*="stock"]',
        ],
        "shipping": [
            '[class*="shipping"]',
            '[class*="delivery"]',
        ],
        "product_links": [
            'a[href*="/product/"]',
        ],
    }

    def selectors_for(self, field: str) -> list[str]:
        normalized = field.strip().lower()
        configured = super().selectors_for(normalized)
        fallback = self.DEFAULT_SELECTORS.get(normalized, [])
        return [*configured, *fallback]
