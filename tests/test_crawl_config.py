"""
tests/test_crawl_config.py

Retailer JSON loading, crawl settings from the environment, and retailer
resolution by URL host.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from prisbanditt.crawling.config import get_crawl_settings, load_retailer_configs
from prisbanditt.crawling.registry import ScraperRegistry
from prisbanditt.crawling.scrapers import ConfigurableRetailerScraper, ElkjopScraper
from tests.fakes import make_retailer


@pytest.fixture()
def clear_settings_cache():
    get_crawl_settings.cache_clear()
    yield
    get_crawl_settings.cache_clear()


def write_config(tmp_path: Path, retailers: object) -> Path:
    path = tmp_path / "retailers.json"
    path.write_text(json.dumps({"retailers": retailers}), encoding="utf-8")
    return path


def test_bundled_config_has_elkjop() -> None:
    configs = load_retailer_configs(
        config_path=str(Path("prisbanditt/crawling/config/retailers.json").resolve())
    )

    elkjop = next(config for config in configs if config.slug == "elkjop")
    assert elkjop.scraper_type == "elkjop"
    assert "www.elkjop.no" in elkjop.hosts
    assert "elkjop.no" in elkjop.hosts


def test_loader_normalizes_entries(tmp_path: Path) -> None:
    path = write_config(
        tmp_path,
        [
            {
                "slug": " PowerShop ",
                "base_url": "https://www.power.example/",
                "selectors": {"Name": "h1", "price": [".price", "", 3]},
                "headers": {"X-Test": " yes ", "bad": 1},
                "enabled": "false",
            },
            {"slug": "", "base_url": "https://nothing.example"},
            "not-a-dict",
        ],
    )

    configs = load_retailer_configs(config_path=str(path))

    assert len(configs) == 1
    config = configs[0]
    assert config.slug == "powershop"
    assert config.name == "powershop"
    assert config.base_url == "https://www.power.example"
    assert config.hosts == ("www.power.example",)
    assert config.selectors == {"name": ["h1"], "price": [".price"]}
    assert config.headers == {"X-Test": "yes"}
    assert config.enabled is False


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_retailer_configs(config_path=str(tmp_path / "missing.json"))


def test_retailers_must_be_a_list(tmp_path: Path) -> None:
    path = write_config(tmp_path, {"slug": "x"})

    with pytest.raises(ValueError):
        load_retailer_configs(config_path=str(path))


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch, clear_settings_cache) -> None:
    for name in (
        "SCRAPER_BOT_NAME",
        "SCRAPER_REQUEST_DELAY_SECONDS",
        "SCRAPER_MAX_RETRIES",
        "SCRAPER_RESPECT_ROBOTS_TXT",
        "SCRAPER_MAX_PRODUCTS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_crawl_settings()

    assert settings.bot_name == "PrisBanditt-Bot/1.0"
    assert settings.request_delay_seconds == 3.0
    assert settings.max_attempts == 3
    assert settings.respect_robots_txt is True
    assert settings.max_products == 50
    assert settings.retailer_config_path.endswith("retailers.json")


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch, clear_settings_cache) -> None:
    monkeypatch.setenv("SCRAPER_BOT_NAME", "TestBot/2.0")
    monkeypatch.setenv("SCRAPER_REQUEST_DELAY_SECONDS", "-4")
    monkeypatch.setenv("SCRAPER_MAX_RETRIES", "not-a-number")
    monkeypatch.setenv("SCRAPER_RESPECT_ROBOTS_TXT", "off")

    settings = get_crawl_settings()

    assert settings.bot_name == "TestBot/2.0"
    assert settings.request_delay_seconds == 0.0
    assert settings.max_attempts == 3
    assert settings.respect_robots_txt is False


class TestScraperRegistry:
    def test_resolves_retailer_by_host_and_subdomain(self) -> None:
        configs = [make_retailer(), make_retailer(slug="other", hosts=("other.example",))]

        assert ScraperRegistry.resolve_retailer("https://shop.example/p/1", configs).slug == "testshop"
        assert ScraperRegistry.resolve_retailer("https://www.other.example/x", configs).slug == "other"

    def test_unknown_host_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="No enabled retailer"):
            ScraperRegistry.resolve_retailer("https://unknown.example/p", [make_retailer()])

    def test_disabled_retailer_is_skipped(self) -> None:
        with pytest.raises(ValueError):
            ScraperRegistry.resolve_retailer("https://shop.example/p", [make_retailer(enabled=False)])

    def test_relative_url_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="not an absolute URL"):
            ScraperRegistry.resolve_retailer("/p/1", [make_retailer()])

    def test_scraper_class_by_type(self) -> None:
        registry = ScraperRegistry()

        assert registry._resolve_scraper_class(make_retailer()) is ConfigurableRetailerScraper
        assert registry._resolve_scraper_class(make_retailer(scraper_type="elkjop")) is ElkjopScraper

    def test_dynamic_scraper_class(self) -> None:
        config = make_retailer(
            scraper_class="prisbanditt.crawling.scrapers.elkjop_scraper:ElkjopScraper"
        )

        assert ScraperRegistry()._resolve_scraper_class(config) is ElkjopScraper

    def test_dynamic_class_must_be_a_scraper(self) -> None:
        with pytest.raises(ValueError, match="must inherit"):
            ScraperRegistry()._resolve_scraper_class(
                make_retailer(scraper_class="prisbanditt.crawling.errors:ScrapeError")
            )

    def test_unknown_scraper_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown scraper_type"):
            ScraperRegistry()._resolve_scraper_class(make_retailer(scraper_type="nope"))
