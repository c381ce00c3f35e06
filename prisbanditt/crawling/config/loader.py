"""
Environment + JSON config loader for retailer crawling.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from urllib.parse import urlparse

from prisbanditt.config import get_bool_env, get_float_env, get_int_env, get_str_env
from prisbanditt.crawling.config.models import CrawlSettings, RetailerConfig

DEFAULT_BOT_NAME = "PrisBanditt-Bot/1.0"
DEFAULT_CONTACT_EMAIL = "contact@prisbanditt.no"


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _resolve_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


@lru_cache(maxsize=1)
def get_crawl_settings() -> CrawlSettings:
    """
    Return cached crawl settings from environment variables.
    """

    config_path = get_str_env(
        "SCRAPER_RETAILER_CONFIG_PATH",
        str(Path(__file__).resolve().with_name("retailers.json")),
    )
    return CrawlSettings(
        retailer_config_path=str(_resolve_path(config_path)),
        bot_name=get_str_env("SCRAPER_BOT_NAME", DEFAULT_BOT_NAME),
        contact_email=get_str_env("SCRAPER_CONTACT_EMAIL", DEFAULT_CONTACT_EMAIL),
        request_delay_seconds=max(
            0.0,
            get_float_env("SCRAPER_REQUEST_DELAY_SECONDS", 3.0),
        ),
        timeout_seconds=max(
            1.0,
            get_float_env("SCRAPER_TIMEOUT_SECONDS", 30.0),
        ),
        robots_timeout_seconds=max(
            1.0,
            get_float_env("SCRAPER_ROBOTS_TIMEOUT_SECONDS", 10.0),
        ),
        max_attempts=max(
            1,
            get_int_env("SCRAPER_MAX_RETRIES", 3),
        ),
        retry_delay_seconds=max(
            0.0,
            get_float_env("SCRAPER_RETRY_DELAY_SECONDS", 2.0),
        ),
        respect_robots_txt=get_bool_env("SCRAPER_RESPECT_ROBOTS_TXT", True),
        max_products=max(
            1,
            get_int_env("SCRAPER_MAX_PRODUCTS", 50),
        ),
        log_dir=str(_resolve_path(get_str_env("SCRAPER_LOG_DIR", "logs"))),
    )


def load_retailer_configs(*, config_path: str) -> list[RetailerConfig]:
    """
    Load retailer configurations from a JSON file.
    """

    path = _resolve_path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Retailer config file not found: {path}")

    raw_data = json.loads(path.read_text(encoding="utf-8"))
    retailers = raw_data.get("retailers", [])
    if not isinstance(retailers, list):
        raise ValueError("Invalid retailer config: 'retailers' must be a list.")

    parsed: list[RetailerConfig] = []
    for entry in retailers:
        if not isinstance(entry, dict):
            continue

        slug = str(entry.get("slug", "")).strip().lower()
        base_url = str(entry.get("base_url", "")).strip()
        if not slug or not base_url:
            continue

        parsed.append(
            RetailerConfig(
                slug=slug,
                name=str(entry.get("name", slug)).strip() or slug,
                base_url=base_url.rstrip("/"),
                scraper_type=str(entry.get("scraper_type", "configurable")).strip().lower(),
                hosts=_normalize_hosts(base_url=base_url, hosts=entry.get("hosts", [])),
                selectors=_normalize_selectors(entry.get("selectors", {})),
                enabled=_optional_bool(entry.get("enabled"), True),
                headers=_normalize_headers(entry.get("headers", {})),
                scraper_class=_optional_str(entry.get("scraper_class")),
            )
        )

    return parsed


def _normalize_hosts(*, base_url: str, hosts: object) -> tuple[str, ...]:
    normalized: list[str] = []
    base_host = urlparse(base_url).netloc.lower()
    if base_host:
        normalized.append(base_host)
    if isinstance(hosts, list):
        for item in hosts:
            if isinstance(item, str) and item.strip() and item.strip().lower() not in normalized:
                normalized.append(item.strip().lower())
    return tuple(normalized)


def _normalize_selectors(selectors: object) -> dict[str, list[str]]:
    if not isinstance(selectors, dict):
        return {}

    normalized: dict[str, list[str]] = {}
    for key, value in selectors.items():
        if not isinstance(key, str):
            continue
        if isinstance(value, str):
            selector_list = [value.strip()] if value.strip() else []
        elif isinstance(value, list):
            selector_list = [
                item.strip()
                for item in value
                if isinstance(item, str) and item.strip()
            ]
        else:
            selector_list = []
        normalized[key.strip().lower()] = selector_list
    return normalized


def _normalize_headers(headers: object) -> dict[str, str]:
    if not isinstance(headers, dict):
        return {}

    normalized: dict[str, str] = {}
    for key, value in headers.items():
        if not isinstance(key, str) or not isinstance(value, str):
            continue
        if key.strip() and value.strip():
            normalized[key.strip()] = value.strip()
    return normalized


def _optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _optional_bool(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default
