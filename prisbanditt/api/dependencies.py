"""
prisbanditt/api/dependencies.py

Shared FastAPI dependencies for search request parsing.
"""

from __future__ import annotations

from fastapi import HTTPException, Query, status

from prisbanditt.search.queries import SORT_OPTIONS, ProductSearchParams


def _split_csv(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def get_search_params(
    q: str = Query(default="*", description="Search text; '*' matches everything"),
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=20, ge=1, le=250),
    sort: str = Query(default="price_asc", description="relevance, price_asc, price_desc or newest"),
    min_price: float | None = Query(default=None, ge=0),
    max_price: float | None = Query(default=None, ge=0),
    in_stock: bool = Query(default=False, description="Only products in stock somewhere"),
    brand: str | None = Query(default=None, description="Comma-separated brand names"),
    category: str | None = Query(default=None, description="Comma-separated category slugs"),
    retailer: str | None = Query(default=None, description="Comma-separated retailer names"),
) -> ProductSearchParams:
    """
    Validate query parameters into search params.
    """

    if sort not in SORT_OPTIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown sort '{sort}'. Allowed values: {', '.join(sorted(SORT_OPTIONS))}.",
        )
    if min_price is not None and max_price is not None and min_price > max_price:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="min_price must not exceed max_price.",
        )

    return ProductSearchParams(
        query=q,
        page=page,
        per_page=per_page,
        sort=sort,
        min_price=min_price,
        max_price=max_price,
        in_stock_only=in_stock,
        brands=_split_csv(brand),
        categories=_split_csv(category),
        retailers=_split_csv(retailer),
    )
