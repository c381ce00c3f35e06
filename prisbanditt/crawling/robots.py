"""
robots.txt policy helper for crawler compliance.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from urllib.parse import urljoin, urlparse

import requests

from prisbanditt.crawling.activity_log import ActivityLogger

logger = logging.getLogger(__name__)

_CRAWL_DELAY_PATTERN = re.compile(r"^(\d+)")


@dataclass(frozen=True)
class RobotsRules:
    """
    Answer for one URL: may it be fetched, and is there a mandated delay.
    """

    allowed: bool
    crawl_delay: float | None = None


@dataclass(frozen=True)
class RobotsDirective:
    field: str
    value: str


class RobotsRuleSet:
    """
    Raw directives of one origin's robots.txt, evaluated per checked path.
    """

    def __init__(self, directives: Sequence[RobotsDirective] = ()) -> None:
        self._directives = tuple(directives)

    @property
    def directives(self) -> tuple[RobotsDirective, ...]:
        return self._directives

    @classmethod
    def parse(cls, text: str) -> "RobotsRuleSet":
        directives: list[RobotsDirective] = []
        for raw_line in text.splitlines():
            line = raw_line.split("#", 1)[0].strip()
            if ":" not in line:
                continue
            key, value = line.split(":", 1)
            directives.append(RobotsDirective(field=key.strip().lower(), value=value.strip()))
        return cls(directives)

    @classmethod
    def allow_all(cls) -> "RobotsRuleSet":
        return cls()

    def evaluate(self, *, path: str, bot_name: str) -> RobotsRules:
        """
        Scan directives in order and apply those in sections addressed to us.

        Any matching Disallow disallows; the last Crawl-delay wins.
        """

        allowed = True
        crawl_delay: float | None = None
        relevant = False

        for directive in self._directives:
            if directive.field == "user-agent":
                relevant = _agent_matches(directive.value, bot_name)
                continue
            if not relevant:
                continue

            if directive.field == "disallow":
                # An empty Disallow value grants access.
                if directive.value and (directive.value == "/" or path.startswith(directive.value)):
                    allowed = False
            elif directive.field == "crawl-delay":
                seconds = _parse_crawl_delay(directive.value)
                if seconds is not None:
                    crawl_delay = float(seconds)

        return RobotsRules(allowed=allowed, crawl_delay=crawl_delay)


class RobotsPolicyManager:
    """
    Caches robots.txt rule sets per origin for the lifetime of one crawl run.
    """

    def __init__(
        self,
        *,
        session: requests.Session,
        bot_name: str,
        activity_log: ActivityLogger,
        timeout_seconds: float = 10.0,
        headers: Mapping[str, str] | None = None,
        enabled: bool = True,
    ) -> None:
        self._session = session
        self._bot_name = bot_name
        self._activity_log = activity_log
        self._timeout_seconds = timeout_seconds
        self._headers = dict(headers or {})
        self._enabled = enabled
        self._cache: dict[str, RobotsRuleSet] = {}

    def check(self, url: str) -> RobotsRules:
        """
        Return whether `url` may be fetched by this bot and the published crawl delay.
        """

        if not self._enabled:
            return RobotsRules(allowed=True)

        rule_set = self._get_rule_set(url)
        path = urlparse(url).path or "/"
        return rule_set.evaluate(path=path, bot_name=self._bot_name)

    def is_cached(self, url: str) -> bool:
        return self._origin(url) in self._cache

    def _get_rule_set(self, url: str) -> RobotsRuleSet:
        origin = self._origin(url)
        cached = self._cache.get(origin)
        if cached is not None:
            return cached

        robots_url = urljoin(origin, "/robots.txt")
        try:
            response = self._session.get(
                robots_url,
                headers=self._headers,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            self._activity_log.warn(
                "Could not fetch robots.txt, allowing by default",
                origin=origin,
                robots_url=robots_url,
                error=str(exc),
            )
            rule_set = RobotsRuleSet.allow_all()
        else:
            if response.ok:
                rule_set = RobotsRuleSet.parse(response.text or "")
                self._activity_log.info(
                    "robots.txt loaded",
                    origin=origin,
                    robots_url=robots_url,
                    directives=len(rule_set.directives),
                )
            else:
                self._activity_log.warn(
                    "robots.txt unavailable, allowing by default",
                    origin=origin,
                    robots_url=robots_url,
                    status_code=response.status_code,
                )
                rule_set = RobotsRuleSet.allow_all()

        self._cache[origin] = rule_set
        return rule_set

    @staticmethod
    def _origin(url: str) -> str:
        parsed = urlparse(url)
        scheme = parsed.scheme or "https"
        return f"{scheme}://{parsed.netloc.lower()}"


def _agent_matches(agent: str, bot_name: str) -> bool:
    candidate = agent.strip().lower()
    if candidate == "*":
        return True
    full_name = bot_name.strip().lower()
    product_token = full_name.split("/", 1)[0]
    return candidate in {full_name, product_token}


def _parse_crawl_delay(value: str) -> int | None:
    match = _CRAWL_DELAY_PATTERN.match(value.strip())
    if match is None:
        return None
    return int(match.group(1))
