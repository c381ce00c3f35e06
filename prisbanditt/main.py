from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _validate_env() -> None:
    """
    Validate required environment variables before the app is built.

    Raises RuntimeError listing every problem so the operator can fix them
    in one restart.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    if not any(
        os.getenv(name, "").strip()
        for name in ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL")
    ):
        errors.append(
            "No database URL configured. Set DATABASE_URL, CLOUD_DATABASE_URL or LOCAL_DATABASE_URL."
        )

    if not os.getenv("TYPESENSE_API_KEY", "").strip():
        errors.append("TYPESENSE_API_KEY is not set. Product search needs a search-only API key.")

    port = os.getenv("TYPESENSE_PORT", "").strip()
    if port and not port.isdigit():
        errors.append(f"TYPESENSE_PORT='{port}' is not a valid port number.")

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {error}" for error in errors)
        )


def _check_db() -> None:
    """Run SELECT 1 on a fresh session. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    from db.session import SessionLocal

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise RuntimeError("Database unavailable.") from exc


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    _check_db()
    logger.info("Database connectivity confirmed")
    yield


def create_app() -> FastAPI:
    """
    Create and configure the catalog API.
    """

    from prisbanditt.crawling.logging_utils import configure_logging

    _validate_env()
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    application = FastAPI(
        title="PrisBanditt API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from prisbanditt.api.routers import products_router

    application.include_router(products_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
