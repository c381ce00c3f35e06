"""
Retailer scraper class registry and factory.
"""

from __future__ import annotations

import importlib
from collections.abc import Sequence
from urllib.parse import urlparse

from prisbanditt.crawling.config.models import CrawlSettings, RetailerConfig
from prisbanditt.crawling.controller import PoliteCrawlController
from prisbanditt.crawling.fetcher import PageFetcher
from prisbanditt.crawling.scrapers import ConfigurableRetailerScraper, ElkjopScraper, RetailerScraper


class ScraperRegistry:
    """
    Scraper registry supporting built-ins and dynamic import paths.
    """

    def __init__(self) -> None:
        self._registrations: dict[str, type[RetailerScraper]] = {
            "configurable": ConfigurableRetailerScraper,
            "elkjop": ElkjopScraper,
        }

    def create_scraper(
        self,
        *,
        config: RetailerConfig,
        settings: CrawlSettings,
        controller: PoliteCrawlController,
        fetcher: PageFetcher,
    ) -> RetailerScraper:
        scraper_class = self._resolve_scraper_class(config)
        return scraper_class(
            config=config,
            settings=settings,
            controller=controller,
            fetcher=fetcher,
        )

    @staticmethod
    def resolve_retailer(url: str, configs: Sequence[RetailerConfig]) -> RetailerConfig:
        """
        Pick the enabled retailer whose hosts match the URL host.
        """

        host = urlparse(url).netloc.lower()
        if not host:
            raise ValueError(f"'{url}' is not an absolute URL.")

        for config in configs:
            if not config.enabled:
                continue
            for candidate in config.hosts:
                if host == candidate or host.endswith(f".{candidate}"):
                    return config

        known = ", ".join(sorted(config.slug for config in configs if config.enabled)) or "none"
        raise ValueError(f"No enabled retailer configured for host '{host}'. Known retailers: {known}.")

    def _resolve_scraper_class(self, config: RetailerConfig) -> type[RetailerScraper]:
        if config.scraper_class:
            return self._load_dynamic_class(config.scraper_class)

        resolved = self._registrations.get(config.scraper_type)
        if resolved is None:
            allowed = ", ".join(sorted(self._registrations.keys()))
            raise ValueError(
                f"Unknown scraper_type='{config.scraper_type}' for retailer='{config.slug}'. "
                f"Allowed types: {allowed}."
            )
        return resolved

    @staticmethod
    def _load_dynamic_class(path: str) -> type[RetailerScraper]:
        if ":" not in path:
            raise ValueError(f"Invalid scraper_class '{path}'. Use 'module.path:ClassName'.")

        module_path, class_name = path.split(":", 1)
        module = importlib.import_module(module_path)
        loaded = getattr(module, class_name, None)
        if loaded is None:
            raise ValueError(f"Unable to resolve scraper class '{path}'.")
        if not isinstance(loaded, type) or not issubclass(loaded, RetailerScraper):
            raise ValueError(f"Class '{path}' must inherit from RetailerScraper.")
        return loaded
