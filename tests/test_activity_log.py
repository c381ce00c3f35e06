"""
tests/test_activity_log.py
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from prisbanditt.crawling.activity_log import (
    ActivityLevel,
    ActivityLogger,
    FileActivitySink,
    MemoryActivitySink,
)
from prisbanditt.crawling.logging_utils import SUCCESS
from tests.fakes import BOT_NAME, CONTACT_EMAIL, StepClock


def test_file_log_has_header_and_json_lines(tmp_path: Path) -> None:
    clock = StepClock(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))
    activity_log = ActivityLogger.for_directory(
        log_dir=tmp_path,
        bot_name=BOT_NAME,
        contact_email=CONTACT_EMAIL,
        clock=clock,
    )

    activity_log.info("Scraping product page", url="https://shop.example/p/1")
    activity_log.success("Successfully scraped product", name="TV", price=12990.0)

    log_path = Path(activity_log.log_path)
    assert log_path.parent == tmp_path
    assert log_path.name == "scraper-2025-03-01T12-00-01-000-00-00.log"

    content = log_path.read_text(encoding="utf-8")
    header, _, body = content.partition("\n\n")
    assert "PRISBANDITT SCRAPER ACTIVITY LOG" in header
    assert f"Bot: {BOT_NAME}" in header
    assert f"Contact: {CONTACT_EMAIL}" in header

    entries = [json.loads(line) for line in body.splitlines() if line.strip()]
    assert [entry["level"] for entry in entries] == ["INFO", "SUCCESS"]
    assert entries[0]["action"] == "Scraping product page"
    assert entries[0]["details"] == {"url": "https://shop.example/p/1"}
    assert entries[1]["details"]["price"] == 12990.0


def test_file_sink_creates_missing_directory(tmp_path: Path) -> None:
    sink = FileActivitySink(tmp_path / "nested" / "run.log")

    ActivityLogger(sink=sink, bot_name=BOT_NAME, contact_email=CONTACT_EMAIL)

    assert (tmp_path / "nested" / "run.log").exists()


def test_memory_sink_records_levels_in_order() -> None:
    sink = MemoryActivitySink()
    activity_log = ActivityLogger(sink=sink, bot_name=BOT_NAME, contact_email=CONTACT_EMAIL)

    activity_log.info("a")
    activity_log.warn("b")
    activity_log.error("c")
    activity_log.success("d")

    assert sink.actions() == ["a", "b", "c", "d"]
    assert sink.actions(ActivityLevel.WARN) == ["b"]
    assert sink.header[1] == "PRISBANDITT SCRAPER ACTIVITY LOG"
    assert activity_log.log_path is None


def test_unknown_level_is_rejected() -> None:
    activity_log = ActivityLogger(
        sink=MemoryActivitySink(),
        bot_name=BOT_NAME,
        contact_email=CONTACT_EMAIL,
    )

    with pytest.raises(ValueError):
        activity_log.log("DEBUG", "nope")


def test_entries_are_mirrored_to_logging(caplog: pytest.LogCaptureFixture) -> None:
    activity_log = ActivityLogger(
        sink=MemoryActivitySink(),
        bot_name=BOT_NAME,
        contact_email=CONTACT_EMAIL,
    )

    with caplog.at_level(logging.INFO, logger="prisbanditt.crawling.activity_log"):
        activity_log.success("Inserted new product", name="TV")
        activity_log.warn("Skipping - disallowed by robots.txt", url="https://shop.example/a")

    assert [record.levelno for record in caplog.records] == [SUCCESS, logging.WARNING]
    payload = json.loads(caplog.records[0].getMessage())
    assert payload == {"event": "Inserted new product", "name": "TV"}
