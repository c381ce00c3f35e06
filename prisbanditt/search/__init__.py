"""
Product search index integration.
"""

from prisbanditt.search.client import ImportResult, SearchClient, SearchIndexError
from prisbanditt.search.indexer import SearchIndexer, build_product_document
from prisbanditt.search.queries import ProductSearchParams, build_filter_by, build_search_parameters
from prisbanditt.search.schema import ProductSearchDocument, products_collection_schema

__all__ = [
    "ImportResult",
    "ProductSearchDocument",
    "ProductSearchParams",
    "SearchClient",
    "SearchIndexError",
    "SearchIndexer",
    "build_filter_by",
    "build_product_document",
    "build_search_parameters",
    "products_collection_schema",
]
