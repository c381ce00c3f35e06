"""
Storage layer exports.
"""

from prisbanditt.crawling.storage.base import CatalogStore
from prisbanditt.crawling.storage.sqlalchemy_store import SQLAlchemyCatalogStore

__all__ = ["CatalogStore", "SQLAlchemyCatalogStore"]
