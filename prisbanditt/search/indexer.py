"""
Builds product search documents from the catalog and pushes them to the index.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from db.models import Product
from prisbanditt.crawling.logging_utils import log_event
from prisbanditt.domain.products import PriceSummary
from prisbanditt.repositories.catalog_repository import CatalogRepository
from prisbanditt.search.client import ImportResult, SearchClient
from prisbanditt.search.schema import ProductSearchDocument

logger = logging.getLogger(__name__)


def _unix_seconds(value: datetime | None) -> int:
    if value is None:
        return int(datetime.now(timezone.utc).timestamp())
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def build_product_document(product: Product, summary: PriceSummary) -> ProductSearchDocument:
    category = product.category
    return ProductSearchDocument(
        id=str(product.id),
        name=product.name,
        slug=product.slug,
        created_at=_unix_seconds(product.created_at),
        updated_at=_unix_seconds(product.updated_at),
        brand=product.brand,
        ean=product.ean,
        category_name=category.name if category is not None else None,
        category_slug=category.slug if category is not None else None,
        image_url=product.image_url,
        description=product.description,
        lowest_price=summary.lowest_price,
        highest_price=summary.highest_price,
        average_price=summary.average_price,
        retailers=list(summary.retailer_names),
        in_stock=summary.in_stock,
    )


class SearchIndexer:
    """
    Re-indexes catalog products after a crawl run.
    """

    def __init__(self, *, client: SearchClient) -> None:
        self._client = client

    def index_products(self, *, session: Session, product_ids: Sequence[str]) -> ImportResult:
        repository = CatalogRepository(session)
        documents: list[dict[str, object]] = []
        for raw_id in product_ids:
            product = repository.get_product(uuid.UUID(raw_id))
            if product is None:
                log_event(logger, logging.WARNING, "search_index_product_missing", product_id=raw_id)
                continue
            summary = repository.price_summary(product.id)
            documents.append(build_product_document(product, summary).to_dict())

        return self._client.import_documents(documents, action="upsert")

    def close(self) -> None:
        self._client.close()
