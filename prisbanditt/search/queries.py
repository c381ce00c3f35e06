"""
Search request builders for product queries.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

QUERY_BY = "name,brand,description,ean"
FACET_BY = "brand,category_name,retailers,in_stock"
SORT_OPTIONS = {
    "relevance": "_text_match:desc",
    "price_asc": "lowest_price:asc",
    "price_desc": "lowest_price:desc",
    "newest": "created_at:desc",
}


@dataclass(frozen=True)
class ProductSearchParams:
    query: str = "*"
    page: int = 1
    per_page: int = 20
    sort: str = "price_asc"
    min_price: float | None = None
    max_price: float | None = None
    in_stock_only: bool = False
    brands: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    retailers: tuple[str, ...] = ()
    filter_by: str | None = None


def _quoted_list(values: Sequence[str]) -> str:
    return ",".join(f"`{value}`" for value in values)


def build_filter_by(params: ProductSearchParams) -> str | None:
    """
    Combine structured filters into one filter expression.

    Structured filters replace a raw `filter_by` when any are given.
    """

    parts: list[str] = []
    if params.min_price is not None:
        parts.append(f"lowest_price:>={params.min_price}")
    if params.max_price is not None:
        parts.append(f"lowest_price:<={params.max_price}")
    if params.in_stock_only:
        parts.append("in_stock:true")
    if params.brands:
        parts.append(f"brand:[{_quoted_list(params.brands)}]")
    if params.categories:
        parts.append(f"category_slug:[{_quoted_list(params.categories)}]")
    if params.retailers:
        parts.append(f"retailers:[{_quoted_list(params.retailers)}]")

    if parts:
        return " && ".join(parts)
    return params.filter_by or None


def build_search_parameters(params: ProductSearchParams) -> dict[str, Any]:
    sort_by = SORT_OPTIONS.get(params.sort)
    if sort_by is None:
        allowed = ", ".join(sorted(SORT_OPTIONS))
        raise ValueError(f"Unknown sort '{params.sort}'. Allowed values: {allowed}.")

    search_parameters: dict[str, Any] = {
        "q": params.query.strip() or "*",
        "query_by": QUERY_BY,
        "page": max(1, params.page),
        "per_page": min(250, max(1, params.per_page)),
        "sort_by": sort_by,
        "num_typos": 2,
        "typo_tokens_threshold": 1,
        "highlight_full_fields": "name,brand",
        "facet_by": FACET_BY,
        "max_facet_values": 50,
    }
    filter_by = build_filter_by(params)
    if filter_by:
        search_parameters["filter_by"] = filter_by
    return search_parameters


def build_autocomplete_parameters(query: str, limit: int = 5) -> dict[str, Any]:
    return {
        "q": query,
        "query_by": "name,brand",
        "per_page": max(1, limit),
        "num_typos": 1,
        "prefix": "true",
    }
