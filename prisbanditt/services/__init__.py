"""
Service layer for scrape runs and catalog reads.
"""

from prisbanditt.services.catalog_service import (
    CatalogService,
    ProductDetail,
    ProductNotFoundError,
    get_catalog_service,
)
from prisbanditt.services.scrape_service import PriceScrapeService

__all__ = [
    "CatalogService",
    "PriceScrapeService",
    "ProductDetail",
    "ProductNotFoundError",
    "get_catalog_service",
]
