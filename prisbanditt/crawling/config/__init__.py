"""
Config helpers for retailer crawling.
"""

from prisbanditt.crawling.config.loader import get_crawl_settings, load_retailer_configs
from prisbanditt.crawling.config.models import CrawlSettings, RetailerConfig

__all__ = [
    "CrawlSettings",
    "RetailerConfig",
    "get_crawl_settings",
    "load_retailer_configs",
]
