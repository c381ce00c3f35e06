"""
SQLAlchemy-backed catalog store for scraped price records.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prisbanditt.crawling.activity_log import ActivityLogger
from prisbanditt.crawling.config.models import RetailerConfig
from prisbanditt.crawling.storage.base import CatalogStore
from prisbanditt.domain.products import ScrapedRecord, StoreResult
from prisbanditt.repositories.catalog_repository import CatalogRepository


class SQLAlchemyCatalogStore(CatalogStore):
    """
    Persist each record in its own transaction through the catalog repository.
    """

    def __init__(
        self,
        *,
        session: Session,
        activity_log: ActivityLogger,
        retailers: Mapping[str, RetailerConfig] | None = None,
    ) -> None:
        self._session = session
        self._activity_log = activity_log
        self._retailers = dict(retailers or {})

    def store(self, records: Sequence[ScrapedRecord]) -> StoreResult:
        if not records:
            return StoreResult(saved=0, failed=0)

        self._activity_log.info("Saving products to catalog", count=len(records))
        repository = CatalogRepository(self._session)
        saved = 0
        product_ids: list[str] = []
        errors: list[str] = []

        for record in records:
            retailer_config = self._retailers.get(record.retailer_id)
            try:
                retailer = repository.get_or_create_retailer(
                    slug=record.retailer_id,
                    name=retailer_config.name if retailer_config else None,
                    website_url=retailer_config.base_url if retailer_config else None,
                )
                listing, created = repository.upsert_listing(record, retailer=retailer)
                price = repository.record_price(listing, record)
                product_id = str(listing.product_id)
                self._session.commit()
            except SQLAlchemyError as exc:
                self._session.rollback()
                errors.append(f"url={record.source_url} error={exc}")
                self._activity_log.error(
                    "Error saving product to catalog",
                    name=record.name,
                    url=record.source_url,
                    error=str(exc),
                )
                continue

            saved += 1
            if product_id not in product_ids:
                product_ids.append(product_id)
            if created:
                self._activity_log.success("Inserted new product", name=record.name, id=product_id)
            else:
                self._activity_log.info("Updated product", name=record.name, id=product_id)
            self._activity_log.info(
                "Inserted price record",
                name=record.name,
                price=record.price,
                price_change=price.price_change,
            )

        self._activity_log.success(
            "Finished saving to catalog",
            total=len(records),
            saved=saved,
            failed=len(errors),
        )
        return StoreResult(
            saved=saved,
            failed=len(errors),
            product_ids=product_ids,
            errors=errors,
        )
