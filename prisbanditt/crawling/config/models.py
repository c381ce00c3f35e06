"""
Crawl configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RetailerConfig:
    """
    One retailer crawl target configuration.
    """

    slug: str
    name: str
    base_url: str
    scraper_type: str = "configurable"
    hosts: tuple[str, ...] = ()
    selectors: dict[str, list[str]] = field(default_factory=dict)
    enabled: bool = True
    headers: dict[str, str] = field(default_factory=dict)
    scraper_class: str | None = None


@dataclass(frozen=True)
class CrawlSettings:
    """
    Runtime settings for polite crawling.
    """

    retailer_config_path: str
    bot_name: str
    contact_email: str
    request_delay_seconds: float
    timeout_seconds: float
    robots_timeout_seconds: float
    max_attempts: int
    retry_delay_seconds: float
    respect_robots_txt: bool
    max_products: int
    log_dir: str
