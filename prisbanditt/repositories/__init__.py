"""
Repository exports.
"""

from prisbanditt.repositories.catalog_repository import CatalogRepository, PriceObservation

__all__ = ["CatalogRepository", "PriceObservation"]
