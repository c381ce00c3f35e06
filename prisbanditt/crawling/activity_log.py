"""
Append-only activity log for crawl runs.

Every robots.txt decision, rate-limit wait, attempt and outcome of a run is
written as one JSON line to a per-run sink and mirrored to the console
through the standard logging channel. Writes are flushed before returning.
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from prisbanditt.crawling.logging_utils import SUCCESS, log_event

logger = logging.getLogger(__name__)

_HEADER_RULE = "=" * 80


class ActivityLevel:
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    SUCCESS = "SUCCESS"


_LOGGING_LEVELS = {
    ActivityLevel.INFO: logging.INFO,
    ActivityLevel.WARN: logging.WARNING,
    ActivityLevel.ERROR: logging.ERROR,
    ActivityLevel.SUCCESS: SUCCESS,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ActivityEntry:
    """
    One structured activity log entry.
    """

    timestamp: datetime
    level: str
    action: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(timespec="milliseconds"),
            "level": self.level,
            "action": self.action,
        }
        if self.details:
            payload["details"] = self.details
        return json.dumps(payload, default=str, ensure_ascii=False)


class ActivitySink(ABC):
    """
    Destination for activity entries.
    """

    @property
    def location(self) -> str | None:
        return None

    @abstractmethod
    def write_header(self, lines: Sequence[str]) -> None:
        """
        Start a fresh log with the given header lines.
        """

    @abstractmethod
    def append(self, entry: ActivityEntry) -> None:
        """
        Durably append one entry.
        """


class FileActivitySink(ActivitySink):
    """
    Plain-text file sink; the header is free text, entries are JSON lines.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def location(self) -> str:
        return str(self._path)

    def write_header(self, lines: Sequence[str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as handle:
            handle.write("\n".join(lines) + "\n\n")
            handle.flush()
            os.fsync(handle.fileno())

    def append(self, entry: ActivityEntry) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(entry.to_json() + "\n")
            handle.flush()
            os.fsync(handle.fileno())


class MemoryActivitySink(ActivitySink):
    """
    In-memory sink for tests and dry runs.
    """

    def __init__(self) -> None:
        self.header: list[str] = []
        self.entries: list[ActivityEntry] = []

    def write_header(self, lines: Sequence[str]) -> None:
        self.header = list(lines)
        self.entries = []

    def append(self, entry: ActivityEntry) -> None:
        self.entries.append(entry)

    def actions(self, level: str | None = None) -> list[str]:
        return [entry.action for entry in self.entries if level is None or entry.level == level]


class ActivityLogger:
    """
    Injected logger with info/warn/error/success severities.
    """

    def __init__(
        self,
        *,
        sink: ActivitySink,
        bot_name: str,
        contact_email: str,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sink = sink
        self._clock = clock
        self.bot_name = bot_name
        self.contact_email = contact_email
        self.started_at = clock()
        self._sink.write_header(
            [
                _HEADER_RULE,
                "PRISBANDITT SCRAPER ACTIVITY LOG",
                f"Started: {self.started_at.isoformat(timespec='milliseconds')}",
                f"Bot: {bot_name}",
                f"Contact: {contact_email}",
                _HEADER_RULE,
            ]
        )

    @classmethod
    def for_directory(
        cls,
        *,
        log_dir: str | Path,
        bot_name: str,
        contact_email: str,
        clock: Callable[[], datetime] = _utcnow,
    ) -> "ActivityLogger":
        """
        Create a logger writing to a fresh file named after the run start.
        """

        stamp = clock().isoformat(timespec="milliseconds")
        for char in ":.+":
            stamp = stamp.replace(char, "-")
        path = Path(log_dir) / f"scraper-{stamp}.log"
        return cls(
            sink=FileActivitySink(path),
            bot_name=bot_name,
            contact_email=contact_email,
            clock=clock,
        )

    @property
    def log_path(self) -> str | None:
        return self._sink.location

    def log(self, level: str, action: str, **details: Any) -> ActivityEntry:
        if level not in _LOGGING_LEVELS:
            raise ValueError(f"Unknown activity level '{level}'.")

        entry = ActivityEntry(
            timestamp=self._clock(),
            level=level,
            action=action,
            details=details,
        )
        self._sink.append(entry)
        log_event(logger, _LOGGING_LEVELS[level], action, **details)
        return entry

    def info(self, action: str, **details: Any) -> ActivityEntry:
        return self.log(ActivityLevel.INFO, action, **details)

    def warn(self, action: str, **details: Any) -> ActivityEntry:
        return self.log(ActivityLevel.WARN, action, **details)

    def error(self, action: str, **details: Any) -> ActivityEntry:
        return self.log(ActivityLevel.ERROR, action, **details)

    def success(self, action: str, **details: Any) -> ActivityEntry:
        return self.log(ActivityLevel.SUCCESS, action, **details)
