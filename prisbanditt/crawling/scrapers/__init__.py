"""
Scraper subclass exports.
"""

from prisbanditt.crawling.scrapers.base import RetailerScraper
from prisbanditt.crawling.scrapers.configurable_scraper import ConfigurableRetailerScraper
from prisbanditt.crawling.scrapers.elkjop_scraper import ElkjopScraper

__all__ = ["ConfigurableRetailerScraper", "ElkjopScraper", "RetailerScraper"]
