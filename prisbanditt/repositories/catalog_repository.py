"""
prisbanditt/repositories/catalog_repository.py

Persistence layer for the product catalog and the price observation log.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models import Price, Product, ProductRetailer, Retailer
from prisbanditt.domain.products import (
    PriceSummary,
    ScrapedRecord,
    calculate_price_change,
    is_in_stock,
    slugify,
)


@dataclass(frozen=True)
class PriceObservation:
    """
    One price history point joined with its retailer.
    """

    retailer_slug: str
    retailer_name: str
    price: float
    shipping_cost: float | None
    total_price: float
    currency: str
    scraped_at: datetime


class CatalogRepository:
    """
    Repository for catalog upserts, append-only price rows and price aggregates.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_or_create_retailer(
        self,
        *,
        slug: str,
        name: str | None = None,
        website_url: str | None = None,
    ) -> Retailer:
        retailer = self._session.scalars(select(Retailer).where(Retailer.slug == slug)).first()
        if retailer is not None:
            return retailer

        retailer = Retailer(
            slug=slug,
            name=name or slug,
            website_url=website_url or "",
            is_active=True,
        )
        self._session.add(retailer)
        self._session.flush()
        return retailer

    def find_listing(self, product_url: str) -> ProductRetailer | None:
        return self._session.scalars(
            select(ProductRetailer).where(ProductRetailer.product_url == product_url)
        ).first()

    def find_product_by_ean(self, ean: str) -> Product | None:
        return self._session.scalars(select(Product).where(Product.ean == ean)).first()

    def get_product_by_slug(self, slug: str) -> Product | None:
        return self._session.scalars(select(Product).where(Product.slug == slug)).first()

    def get_product(self, product_id: uuid.UUID) -> Product | None:
        return self._session.get(Product, product_id)

    def upsert_listing(
        self,
        record: ScrapedRecord,
        *,
        retailer: Retailer,
    ) -> tuple[ProductRetailer, bool]:
        """
        Create or update the product and its listing for this retailer.

        A known listing URL updates its product. Otherwise the product is
        matched by EAN across retailers, or created. Returns the listing and
        whether a new product row was created.
        """

        created = False
        listing = self.find_listing(record.source_url)
        if listing is not None:
            product = listing.product
        else:
            product = self.find_product_by_ean(record.ean) if record.ean else None
            if product is None:
                product = Product(name=record.name, slug=self._unique_slug(record.name))
                self._session.add(product)
                created = True
            listing = ProductRetailer(
                product=product,
                retailer=retailer,
                product_url=record.source_url,
            )
            self._session.add(listing)

        product.name = record.name
        product.brand = record.brand or product.brand
        product.ean = product.ean or record.ean
        product.image_url = record.image_url or product.image_url

        listing.stock_status = record.stock_status
        listing.is_available = is_in_stock(record.stock_status)
        listing.last_checked_at = record.scraped_at
        self._session.flush()
        return listing, created

    def record_price(self, listing: ProductRetailer, record: ScrapedRecord) -> Price:
        """
        Append one price observation, carrying the change from the previous one.
        """

        previous = self.latest_price(listing.id)
        price = Price(
            product_retailer_id=listing.id,
            price=record.price,
            shipping_cost=record.shipping_cost,
            total_price=record.total_price,
            currency="NOK",
            scraped_at=record.scraped_at,
        )
        if previous is not None:
            change = calculate_price_change(record.price, previous.price)
            price.previous_price = previous.price
            price.price_change = change.amount
            price.price_change_percent = change.percentage

        self._session.add(price)
        self._session.flush()
        return price

    def latest_price(self, listing_id: uuid.UUID) -> Price | None:
        return self._session.scalars(
            select(Price)
            .where(Price.product_retailer_id == listing_id)
            .order_by(Price.scraped_at.desc())
            .limit(1)
        ).first()

    def current_prices(self, product_id: uuid.UUID) -> list[tuple[ProductRetailer, Price]]:
        """
        Latest price per retailer listing of a product, cheapest first.
        """

        listings = self._session.scalars(
            select(ProductRetailer).where(ProductRetailer.product_id == product_id)
        ).all()
        current: list[tuple[ProductRetailer, Price]] = []
        for listing in listings:
            latest = self.latest_price(listing.id)
            if latest is not None:
                current.append((listing, latest))
        current.sort(key=lambda item: item[1].total_price)
        return current

    def price_summary(self, product_id: uuid.UUID) -> PriceSummary:
        """
        Minimum, maximum and average of the current per-retailer prices.
        """

        current = self.current_prices(product_id)
        if not current:
            return PriceSummary(lowest_price=None, highest_price=None, average_price=None)

        prices = [price.price for _, price in current]
        return PriceSummary(
            lowest_price=min(prices),
            highest_price=max(prices),
            average_price=round(sum(prices) / len(prices), 2),
            retailer_names=sorted({listing.retailer.name for listing, _ in current}),
            in_stock=any(listing.is_available for listing, _ in current),
            last_scraped_at=max(price.scraped_at for _, price in current),
        )

    def price_history(
        self,
        product_id: uuid.UUID,
        *,
        since: datetime | None = None,
    ) -> list[PriceObservation]:
        stmt = (
            select(Price, Retailer)
            .join(ProductRetailer, Price.product_retailer_id == ProductRetailer.id)
            .join(Retailer, ProductRetailer.retailer_id == Retailer.id)
            .where(ProductRetailer.product_id == product_id)
            .order_by(Price.scraped_at.asc())
        )
        if since is not None:
            stmt = stmt.where(Price.scraped_at >= since)

        return [
            PriceObservation(
                retailer_slug=retailer.slug,
                retailer_name=retailer.name,
                price=price.price,
                shipping_cost=price.shipping_cost,
                total_price=price.total_price,
                currency=price.currency,
                scraped_at=_as_utc(price.scraped_at),
            )
            for price, retailer in self._session.execute(stmt).all()
        ]

    def count_prices(self, product_id: uuid.UUID) -> int:
        return self._session.scalar(
            select(func.count(Price.id))
            .join(ProductRetailer, Price.product_retailer_id == ProductRetailer.id)
            .where(ProductRetailer.product_id == product_id)
        ) or 0

    def _unique_slug(self, name: str) -> str:
        base = slugify(name)
        existing = set(
            self._session.scalars(
                select(Product.slug).where(
                    (Product.slug == base) | Product.slug.like(f"{base}-%")
                )
            ).all()
        )
        if base not in existing:
            return base
        suffix = 2
        while f"{base}-{suffix}" in existing:
            suffix += 1
        return f"{base}-{suffix}"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
