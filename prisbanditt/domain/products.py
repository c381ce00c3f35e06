"""
prisbanditt/domain/products.py

Domain models for scraped product observations and run summaries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ScrapedRecord:
    """
    One product observation extracted from a retailer page.
    """

    name: str
    price: float
    source_url: str
    retailer_id: str
    scraped_at: datetime
    brand: str | None = None
    ean: str | None = None
    image_url: str | None = None
    shipping_cost: float | None = None
    stock_status: str = "unknown"

    @property
    def total_price(self) -> float:
        return round(self.price + (self.shipping_cost or 0.0), 2)


@dataclass(frozen=True)
class StoreResult:
    """
    Outcome of persisting a batch of records.
    """

    saved: int
    failed: int
    product_ids: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CrawlRunSummary:
    """
    Summary for one CLI or API scrape run.
    """

    target_url: str
    retailer: str
    records_scraped: int
    records_saved: int
    records_indexed: int
    failed_pages: int
    status: str
    log_path: str | None = None
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PriceSummary:
    """
    Aggregate over the current price of each retailer listing of one product.
    """

    lowest_price: float | None
    highest_price: float | None
    average_price: float | None
    retailer_names: list[str] = field(default_factory=list)
    in_stock: bool = False
    last_scraped_at: datetime | None = None


@dataclass(frozen=True)
class PriceChange:
    amount: float
    percentage: float
    direction: str


_OUT_OF_STOCK_MARKERS = (
    "ikke på lager",
    "ikke tilgjengelig",
    "utsolgt",
    "out of stock",
    "sold out",
    "unavailable",
)
_IN_STOCK_MARKERS = (
    "på lager",
    "på nettlager",
    "tilgjengelig",
    "in stock",
    "available",
)
_SLUG_TRANSLATION = str.maketrans({"æ": "ae", "ø": "o", "å": "a", "ä": "a", "ö": "o", "ü": "u"})


def is_in_stock(stock_status: str | None) -> bool:
    """
    Interpret a retailer's stock text. Unknown text counts as not in stock.
    """

    if not stock_status:
        return False
    normalized = stock_status.strip().lower()
    if any(marker in normalized for marker in _OUT_OF_STOCK_MARKERS):
        return False
    return any(marker in normalized for marker in _IN_STOCK_MARKERS)


def calculate_price_change(current: float, previous: float) -> PriceChange:
    if previous == 0:
        return PriceChange(amount=round(current - previous, 2), percentage=0.0, direction="same")

    amount = round(current - previous, 2)
    percentage = round(amount / previous * 100, 2)
    if amount > 0:
        direction = "up"
    elif amount < 0:
        direction = "down"
    else:
        direction = "same"
    return PriceChange(amount=amount, percentage=percentage, direction=direction)


def slugify(value: str) -> str:
    lowered = value.strip().lower().translate(_SLUG_TRANSLATION)
    slug = re.sub(r"[^a-z0-9]+", "-", lowered).strip("-")
    return slug[:200] or "product"
