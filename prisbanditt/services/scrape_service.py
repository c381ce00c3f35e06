"""
prisbanditt/services/scrape_service.py

Service orchestration for one price scrape run: crawl, persist, index.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from prisbanditt.config import SearchSettings, get_search_settings
from prisbanditt.crawling.activity_log import ActivityLogger
from prisbanditt.crawling.config import get_crawl_settings, load_retailer_configs
from prisbanditt.crawling.config.models import CrawlSettings
from prisbanditt.crawling.engine import PriceCrawlEngine
from prisbanditt.crawling.logging_utils import log_event
from prisbanditt.crawling.storage import SQLAlchemyCatalogStore
from prisbanditt.domain.products import CrawlRunSummary
from prisbanditt.search.client import SearchClient, SearchIndexError
from prisbanditt.search.indexer import SearchIndexer

logger = logging.getLogger(__name__)

EngineFactory = Callable[[ActivityLogger], PriceCrawlEngine]
IndexerFactory = Callable[[], SearchIndexer]


class PriceScrapeService:
    """
    Runs the polite crawler for one URL and stores what it extracted.
    """

    def __init__(
        self,
        *,
        settings: CrawlSettings | None = None,
        search_settings: SearchSettings | None = None,
        engine_factory: EngineFactory | None = None,
        indexer_factory: IndexerFactory | None = None,
    ) -> None:
        self._settings = settings or get_crawl_settings()
        self._search_settings = search_settings or get_search_settings()
        self._engine_factory = engine_factory or self._default_engine
        self._indexer_factory = indexer_factory or self._default_indexer

    def scrape_and_save(
        self,
        *,
        db: Session,
        url: str,
        activity_log: ActivityLogger,
        category: bool = False,
        max_products: int | None = None,
        index: bool = True,
    ) -> CrawlRunSummary:
        engine = self._engine_factory(activity_log)
        run_result = engine.run(url, category=category, max_products=max_products)
        errors = list(run_result.errors)

        if not run_result.records:
            activity_log.warn("No products were extracted", url=url)
            return self._summarize(
                url=url,
                retailer=run_result.retailer,
                scraped=0,
                saved=0,
                indexed=0,
                failed_pages=run_result.failed_pages,
                errors=errors,
                activity_log=activity_log,
            )

        retailers = {
            config.slug: config
            for config in load_retailer_configs(config_path=self._settings.retailer_config_path)
        }
        store = SQLAlchemyCatalogStore(session=db, activity_log=activity_log, retailers=retailers)
        store_result = store.store(run_result.records)
        errors.extend(store_result.errors)

        indexed = 0
        if index and store_result.product_ids:
            indexed, index_errors = self._index(
                db=db,
                product_ids=store_result.product_ids,
                activity_log=activity_log,
            )
            errors.extend(index_errors)
        elif not index:
            activity_log.info("Search indexing skipped")

        return self._summarize(
            url=url,
            retailer=run_result.retailer,
            scraped=len(run_result.records),
            saved=store_result.saved,
            indexed=indexed,
            failed_pages=run_result.failed_pages,
            errors=errors,
            activity_log=activity_log,
        )

    def _index(
        self,
        *,
        db: Session,
        product_ids: list[str],
        activity_log: ActivityLogger,
    ) -> tuple[int, list[str]]:
        if not self._search_settings.enabled:
            activity_log.warn("Search indexing skipped - no API key configured")
            return 0, []

        activity_log.info("Indexing products in search", count=len(product_ids))
        indexer = self._indexer_factory()
        try:
            result = indexer.index_products(session=db, product_ids=product_ids)
        except SearchIndexError as exc:
            activity_log.error("Search indexing failed", error=str(exc))
            return 0, [f"search index error={exc}"]
        finally:
            indexer.close()

        if result.failed:
            activity_log.warn(
                "Some products were not indexed",
                indexed=result.succeeded,
                failed=result.failed,
            )
        else:
            activity_log.success("Indexed products in search", count=result.succeeded)
        return result.succeeded, [f"search index error={error}" for error in result.errors]

    def _summarize(
        self,
        *,
        url: str,
        retailer: str,
        scraped: int,
        saved: int,
        indexed: int,
        failed_pages: int,
        errors: list[str],
        activity_log: ActivityLogger,
    ) -> CrawlRunSummary:
        if scraped == 0 or saved == 0:
            status = "failed"
        elif failed_pages > 0 or errors:
            status = "partial_success"
        else:
            status = "success"

        summary = CrawlRunSummary(
            target_url=url,
            retailer=retailer,
            records_scraped=scraped,
            records_saved=saved,
            records_indexed=indexed,
            failed_pages=failed_pages,
            status=status,
            log_path=activity_log.log_path,
            errors=errors,
        )
        log_event(
            logger,
            logging.INFO,
            "price_scrape_completed",
            url=url,
            retailer=retailer,
            records_scraped=scraped,
            records_saved=saved,
            records_indexed=indexed,
            failed_pages=failed_pages,
            status=status,
        )
        return summary

    def _default_engine(self, activity_log: ActivityLogger) -> PriceCrawlEngine:
        return PriceCrawlEngine(settings=self._settings, activity_log=activity_log)

    def _default_indexer(self) -> SearchIndexer:
        return SearchIndexer(client=SearchClient(settings=self._search_settings, admin=True))
