"""
BeautifulSoup-based parsing layer for retailer product and category pages.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Any
from urllib.parse import urldefrag, urljoin

from bs4 import BeautifulSoup, Tag

from prisbanditt.crawling.types import ExtractedProduct

PRICE_NUMBER_REGEX = re.compile(r"-?\d[\d \u00a0\u202f.,]*")
DEFAULT_PRODUCT_LINK_SELECTORS = ['a[href*="/product/"]']
EAN_META_SELECTORS = ['meta[itemprop="gtin13"]', 'meta[property="product:ean"]']
GTIN_KEYS = ("gtin13", "gtin")


def parse_price(text: str | None) -> float | None:
    """
    Parse a displayed price such as ``12 990,-``, ``1.299,00 kr`` or ``499.90``.

    Returns None when the text holds no number.
    """

    if not text:
        return None
    match = PRICE_NUMBER_REGEX.search(text)
    if match is None:
        return None

    candidate = re.sub(r"[ \u00a0\u202f]", "", match.group(0)).rstrip(".,")
    if not candidate or candidate == "-":
        return None

    has_comma = "," in candidate
    has_dot = "." in candidate
    if has_comma and has_dot:
        if candidate.rfind(",") > candidate.rfind("."):
            candidate = candidate.replace(".", "").replace(",", ".")
        else:
            candidate = candidate.replace(",", "")
    elif has_comma:
        if candidate.count(",") > 1:
            candidate = candidate.replace(",", "")
        else:
            candidate = candidate.replace(",", ".")
    elif has_dot:
        _, _, tail = candidate.rpartition(".")
        if candidate.count(".") > 1 or len(tail) == 3:
            candidate = candidate.replace(".", "")

    try:
        return float(candidate)
    except ValueError:
        return None


class ProductPageParser:
    """
    Deterministic field extraction driven by per-retailer CSS selectors.
    """

    @classmethod
    def parse_product(
        cls,
        *,
        soup: BeautifulSoup,
        page_url: str,
        selectors: Mapping[str, Sequence[str]],
    ) -> ExtractedProduct:
        return ExtractedProduct(
            name=cls._first_text(soup, selectors.get("name", ())) or "",
            price_text=cls._first_text(soup, selectors.get("price", ())),
            brand=cls._first_text(soup, selectors.get("brand", ())),
            image_url=cls._first_image(soup, selectors.get("image", ()), page_url=page_url),
            stock_status=cls._first_text(soup, selectors.get("stock", ())),
            ean=cls.extract_ean(soup),
            shipping_text=cls._first_text(soup, selectors.get("shipping", ())),
        )

    @classmethod
    def extract_product_links(
        cls,
        *,
        soup: BeautifulSoup,
        page_url: str,
        selectors: Sequence[str] = (),
    ) -> list[str]:
        """
        Absolute product URLs in document order, without duplicates.
        """

        links: list[str] = []
        seen: set[str] = set()
        for node in cls._select_elements(soup, selectors or DEFAULT_PRODUCT_LINK_SELECTORS):
            href = node.get("href")
            if not isinstance(href, str) or not href.strip():
                continue
            absolute, _ = urldefrag(urljoin(page_url, href.strip()))
            if absolute in seen:
                continue
            seen.add(absolute)
            links.append(absolute)
        return links

    @classmethod
    def extract_ean(cls, soup: BeautifulSoup) -> str | None:
        for node in cls._select_elements(soup, EAN_META_SELECTORS):
            content = node.get("content")
            if isinstance(content, str) and content.strip():
                return content.strip()

        for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
            try:
                payload = json.loads(script.string or "")
            except json.JSONDecodeError:
                continue
            for item in cls._json_ld_items(payload):
                for key in GTIN_KEYS:
                    value = item.get(key)
                    if value:
                        return str(value).strip()
        return None

    @staticmethod
    def _select_elements(soup: BeautifulSoup, selectors: Sequence[str]) -> Iterator[Tag]:
        for selector in selectors:
            yield from soup.select(selector)

    @classmethod
    def _first_text(cls, soup: BeautifulSoup, selectors: Sequence[str]) -> str | None:
        for node in cls._select_elements(soup, selectors):
            text = cls._clean_text(node.get_text(" ", strip=True))
            if text:
                return text
        return None

    @classmethod
    def _first_image(
        cls,
        soup: BeautifulSoup,
        selectors: Sequence[str],
        *,
        page_url: str,
    ) -> str | None:
        for node in cls._select_elements(soup, selectors):
            source = node.get("src") or node.get("data-src")
            if isinstance(source, str) and source.strip():
                return urljoin(page_url, source.strip())
        return None

    @classmethod
    def _json_ld_items(cls, payload: Any) -> Iterator[dict[str, Any]]:
        if isinstance(payload, list):
            for entry in payload:
                yield from cls._json_ld_items(entry)
        elif isinstance(payload, dict):
            yield payload
            graph = payload.get("@graph")
            if isinstance(graph, list):
                for entry in graph:
                    yield from cls._json_ld_items(entry)

    @staticmethod
    def _clean_text(value: str) -> str:
        return re.sub(r"\s+", " ", value).strip()
