"""
Pydantic response schemas for the catalog API.
"""

from prisbanditt.schemas.products import (
    OfferResponse,
    PriceHistoryPointResponse,
    PriceHistoryResponse,
    ProductAutocompleteResponse,
    ProductDetailResponse,
    ProductSearchHitResponse,
    ProductSearchResponse,
    SearchFacetCountResponse,
    SearchFacetResponse,
)

__all__ = [
    "OfferResponse",
    "PriceHistoryPointResponse",
    "PriceHistoryResponse",
    "ProductAutocompleteResponse",
    "ProductDetailResponse",
    "ProductSearchHitResponse",
    "ProductSearchResponse",
    "SearchFacetCountResponse",
    "SearchFacetResponse",
]
