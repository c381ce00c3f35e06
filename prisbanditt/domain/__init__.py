"""
Domain models shared by crawling, storage and search.
"""

from prisbanditt.domain.products import (
    CrawlRunSummary,
    PriceChange,
    PriceSummary,
    ScrapedRecord,
    StoreResult,
    calculate_price_change,
    is_in_stock,
    slugify,
)

__all__ = [
    "CrawlRunSummary",
    "PriceChange",
    "PriceSummary",
    "ScrapedRecord",
    "StoreResult",
    "calculate_price_change",
    "is_in_stock",
    "slugify",
]
