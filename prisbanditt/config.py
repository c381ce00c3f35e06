"""
prisbanditt/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def get_bool_env(name: str, default: bool) -> bool:
    _load_env_once()
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def get_int_env(name: str, default: int) -> int:
    _load_env_once()
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_float_env(name: str, default: float) -> float:
    _load_env_once()
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_str_env(name: str, default: str) -> str:
    _load_env_once()
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class SearchSettings:
    """
    Connection settings for the product search service.
    """

    host: str
    port: int
    protocol: str
    api_key: str
    admin_api_key: str
    timeout_seconds: float
    collection: str = "products"

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"

    @property
    def enabled(self) -> bool:
        return bool(self.api_key or self.admin_api_key)


@lru_cache(maxsize=1)
def get_search_settings() -> SearchSettings:
    """
    Return cached search settings from environment variables.
    """

    return SearchSettings(
        host=get_str_env("TYPESENSE_HOST", "localhost"),
        port=get_int_env("TYPESENSE_PORT", 8108),
        protocol=get_str_env("TYPESENSE_PROTOCOL", "http").lower(),
        api_key=get_str_env("TYPESENSE_API_KEY", ""),
        admin_api_key=get_str_env("TYPESENSE_ADMIN_API_KEY", ""),
        timeout_seconds=max(0.5, get_float_env("TYPESENSE_TIMEOUT_SECONDS", 2.0)),
        collection=get_str_env("TYPESENSE_COLLECTION", "products"),
    )
