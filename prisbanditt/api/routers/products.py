"""
prisbanditt/api/routers/products.py

Read-only product search, autocomplete, detail and price history endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from db.session import get_db
from prisbanditt.api.dependencies import get_search_params
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
from prisbanditt.search.client import SearchIndexError
from prisbanditt.search.queries import ProductSearchParams
from prisbanditt.services.catalog_service import (
    CatalogService,
    ProductNotFoundError,
    get_catalog_service,
)

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/search", response_model=ProductSearchResponse)
def search_products(
    params: ProductSearchParams = Depends(get_search_params),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ProductSearchResponse:
    try:
        result = catalog_service.search(params)
    except SearchIndexError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Search is temporarily unavailable.",
        ) from exc

    return ProductSearchResponse(
        found=int(result.get("found", 0)),
        page=int(result.get("page", params.page)),
        hits=[
            ProductSearchHitResponse.from_document(hit["document"])
            for hit in result.get("hits", [])
        ],
        facets=[
            SearchFacetResponse(
                field_name=facet["field_name"],
                counts=[
                    SearchFacetCountResponse(value=str(count["value"]), count=count["count"])
                    for count in facet.get("counts", [])
                ],
            )
            for facet in result.get("facet_counts", [])
        ],
    )


@router.get("/autocomplete", response_model=ProductAutocompleteResponse)
def autocomplete_products(
    q: str = Query(..., min_length=1, max_length=100),
    limit: int = Query(default=5, ge=1, le=20),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ProductAutocompleteResponse:
    """
    Prefix suggestions for the search box.
    """

    try:
        documents = catalog_service.autocomplete(q.strip(), limit=limit)
    except SearchIndexError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Search is temporarily unavailable.",
        ) from exc

    return ProductAutocompleteResponse(
        query=q,
        suggestions=[ProductSearchHitResponse.from_document(document) for document in documents],
    )


@router.get("/{slug}", response_model=ProductDetailResponse)
def get_product(
    slug: str,
    db: Session = Depends(get_db),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ProductDetailResponse:
    """
    Product with the latest price from each retailer, cheapest first.
    """

    try:
        detail = catalog_service.product_detail(db=db, slug=slug)
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    product = detail.product
    offers = [
        OfferResponse(
            retailer_slug=listing.retailer.slug,
            retailer_name=listing.retailer.name,
            product_url=listing.product_url,
            price=price.price,
            shipping_cost=price.shipping_cost,
            total_price=price.total_price,
            currency=price.currency,
            stock_status=listing.stock_status,
            is_available=listing.is_available,
            scraped_at=price.scraped_at,
        )
        for listing, price in detail.offers
    ]
    savings = offers[-1].total_price - offers[0].total_price if offers else 0.0

    return ProductDetailResponse(
        id=str(product.id),
        name=product.name,
        slug=product.slug,
        brand=product.brand,
        ean=product.ean,
        image_url=product.image_url,
        description=product.description,
        category_name=product.category.name if product.category is not None else None,
        lowest_price=detail.summary.lowest_price,
        highest_price=detail.summary.highest_price,
        average_price=detail.summary.average_price,
        savings=round(savings, 2),
        in_stock=detail.summary.in_stock,
        offers=offers,
    )


@router.get("/{slug}/price-history", response_model=PriceHistoryResponse)
def get_price_history(
    slug: str,
    days: int = Query(default=90, ge=1, le=3650),
    db: Session = Depends(get_db),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> PriceHistoryResponse:
    try:
        observations = catalog_service.price_history(db=db, slug=slug, days=days)
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return PriceHistoryResponse(
        slug=slug,
        days=days,
        points=[
            PriceHistoryPointResponse(
                retailer_slug=observation.retailer_slug,
                retailer_name=observation.retailer_name,
                price=observation.price,
                shipping_cost=observation.shipping_cost,
                total_price=observation.total_price,
                currency=observation.currency,
                scraped_at=observation.scraped_at,
            )
            for observation in observations
        ],
    )
