"""
prisbanditt/services/catalog_service.py

Read-side service for product search, product detail and price history.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any

from sqlalchemy.orm import Session

from db.models import Price, Product, ProductRetailer
from prisbanditt.config import get_search_settings
from prisbanditt.domain.products import PriceSummary
from prisbanditt.repositories.catalog_repository import CatalogRepository, PriceObservation
from prisbanditt.search.client import SearchClient
from prisbanditt.search.queries import (
    ProductSearchParams,
    build_autocomplete_parameters,
    build_search_parameters,
)


class ProductNotFoundError(LookupError):
    """Raised when no product exists for a slug."""


@dataclass(frozen=True)
class ProductDetail:
    product: Product
    summary: PriceSummary
    offers: list[tuple[ProductRetailer, Price]]


class CatalogService:
    """
    Serves catalog reads from the database and the search index.
    """

    def __init__(self, *, search_client: SearchClient | None = None) -> None:
        self._search_client = search_client

    def search(self, params: ProductSearchParams) -> dict[str, Any]:
        return self._client().search(build_search_parameters(params))

    def autocomplete(self, query: str, *, limit: int = 5) -> list[dict[str, Any]]:
        result = self._client().search(build_autocomplete_parameters(query, limit=limit))
        return [hit["document"] for hit in result.get("hits", [])]

    def product_detail(self, *, db: Session, slug: str) -> ProductDetail:
        repository = CatalogRepository(db)
        product = repository.get_product_by_slug(slug)
        if product is None:
            raise ProductNotFoundError(f"Product not found: {slug}")
        return ProductDetail(
            product=product,
            summary=repository.price_summary(product.id),
            offers=repository.current_prices(product.id),
        )

    def price_history(
        self,
        *,
        db: Session,
        slug: str,
        days: int = 90,
        now: datetime | None = None,
    ) -> list[PriceObservation]:
        repository = CatalogRepository(db)
        product = repository.get_product_by_slug(slug)
        if product is None:
            raise ProductNotFoundError(f"Product not found: {slug}")
        since = (now or datetime.now(timezone.utc)) - timedelta(days=days)
        return repository.price_history(product.id, since=since)

    def _client(self) -> SearchClient:
        if self._search_client is None:
            self._search_client = SearchClient(settings=get_search_settings())
        return self._search_client


@lru_cache(maxsize=1)
def get_catalog_service() -> CatalogService:
    """
    Build and cache the catalog read service.
    """

    return CatalogService()
