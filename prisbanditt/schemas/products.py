"""
prisbanditt/schemas/products.py

Response schemas for product search, detail and price history.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ProductSearchHitResponse(BaseModel):
    id: str
    name: str
    slug: str
    brand: str | None = None
    ean: str | None = None
    category_name: str | None = None
    image_url: str | None = None
    lowest_price: float | None = None
    highest_price: float | None = None
    average_price: float | None = None
    retailers: list[str] = Field(default_factory=list)
    in_stock: bool | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "ProductSearchHitResponse":
        # Search documents carry Unix seconds.
        payload = dict(document)
        for key in ("created_at", "updated_at"):
            payload[key] = datetime.fromtimestamp(int(payload.get(key, 0)), tz=timezone.utc)
        return cls.model_validate(payload)


class SearchFacetCountResponse(BaseModel):
    value: str
    count: int = Field(..., ge=0)


class SearchFacetResponse(BaseModel):
    field_name: str
    counts: list[SearchFacetCountResponse] = Field(default_factory=list)


class ProductSearchResponse(BaseModel):
    """
    One page of search hits with facet counts.
    """

    found: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    hits: list[ProductSearchHitResponse] = Field(default_factory=list)
    facets: list[SearchFacetResponse] = Field(default_factory=list)


class ProductAutocompleteResponse(BaseModel):
    query: str
    suggestions: list[ProductSearchHitResponse] = Field(default_factory=list)


class OfferResponse(BaseModel):
    retailer_slug: str
    retailer_name: str
    product_url: str
    price: float
    shipping_cost: float | None = None
    total_price: float
    currency: str
    stock_status: str
    is_available: bool
    scraped_at: datetime


class ProductDetailResponse(BaseModel):
    """
    Product with its current offers, cheapest first.
    """

    id: str
    name: str
    slug: str
    brand: str | None = None
    ean: str | None = None
    image_url: str | None = None
    description: str | None = None
    category_name: str | None = None
    lowest_price: float | None = None
    highest_price: float | None = None
    average_price: float | None = None
    savings: float = Field(default=0.0, ge=0)
    in_stock: bool = False
    offers: list[OfferResponse] = Field(default_factory=list)


class PriceHistoryPointResponse(BaseModel):
    retailer_slug: str
    retailer_name: str
    price: float
    shipping_cost: float | None = None
    total_price: float
    currency: str
    scraped_at: datetime


class PriceHistoryResponse(BaseModel):
    slug: str
    days: int = Field(..., ge=1)
    points: list[PriceHistoryPointResponse] = Field(default_factory=list)
