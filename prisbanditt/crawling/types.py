"""
Shared crawl runtime data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from prisbanditt.domain.products import ScrapedRecord


@dataclass(frozen=True)
class ExtractedProduct:
    """
    Raw field values read from a product page before validation.
    """

    name: str
    price_text: str | None
    brand: str | None = None
    image_url: str | None = None
    stock_status: str | None = None
    ean: str | None = None
    shipping_text: str | None = None


@dataclass(frozen=True)
class ScraperRunResult:
    """
    Outcome for one scraper execution over a product or category URL.
    """

    retailer: str
    records: list[ScrapedRecord]
    failed_pages: int
    errors: list[str] = field(default_factory=list)
    skipped_pages: int = 0
