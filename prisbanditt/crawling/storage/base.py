"""
Storage layer interfaces for scraped price records.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from prisbanditt.domain.products import ScrapedRecord, StoreResult


class CatalogStore(ABC):
    """
    Storage abstraction for catalog and price writes.
    """

    @abstractmethod
    def store(self, records: Sequence[ScrapedRecord]) -> StoreResult:
        """
        Persist records one by one; a failing record must not abort the batch.
        """
