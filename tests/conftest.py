from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import db.models  # noqa: F401
from db.base import Base
from db.session import build_session_factory
from prisbanditt.crawling.activity_log import ActivityLogger, MemoryActivitySink
from prisbanditt.crawling.config.models import CrawlSettings
from tests.fakes import BOT_NAME, CONTACT_EMAIL, FakeClock, make_crawl_settings


@pytest.fixture()
def memory_sink() -> MemoryActivitySink:
    return MemoryActivitySink()


@pytest.fixture()
def activity_log(memory_sink: MemoryActivitySink) -> ActivityLogger:
    return ActivityLogger(sink=memory_sink, bot_name=BOT_NAME, contact_email=CONTACT_EMAIL)


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def crawl_settings(tmp_path) -> CrawlSettings:
    return make_crawl_settings(log_dir=str(tmp_path / "logs"))


@pytest.fixture()
def sqlite_engine():
    """In-memory SQLite shared across threads so API tests can use it too."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(sqlite_engine) -> Iterator[Session]:
    with build_session_factory(sqlite_engine)() as session:
        yield session
