"""
Command line entry point for polite price scraping.

    prisbanditt-scrape <url> [--category] [--max-products N] [--skip-index]
"""

from __future__ import annotations

import argparse
import json
from collections.abc import Callable, Sequence
from dataclasses import asdict

from sqlalchemy.orm import Session

from db.config import resolve_database_url
from prisbanditt.config import get_str_env
from prisbanditt.crawling.activity_log import ActivityLogger
from prisbanditt.crawling.config import get_crawl_settings
from prisbanditt.crawling.logging_utils import configure_logging
from prisbanditt.services.scrape_service import PriceScrapeService

_BANNER_RULE = "=" * 63


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer.") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1.")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prisbanditt-scrape",
        description="Scrape a retailer product or category page and store its prices.",
    )
    parser.add_argument("url", help="Product URL, or category URL with --category.")
    parser.add_argument(
        "--category",
        action="store_true",
        help="Treat the URL as a category listing and scrape the products it links to.",
    )
    parser.add_argument(
        "--max-products",
        dest="max_products",
        type=_positive_int,
        default=None,
        help="Maximum number of products to visit from a category page.",
    )
    parser.add_argument(
        "--skip-index",
        dest="skip_index",
        action="store_true",
        help="Store prices without updating the search index.",
    )
    return parser


def _print_banner(bot_name: str, request_delay_seconds: float) -> None:
    print(_BANNER_RULE)
    print("PrisBanditt price scraper")
    print(_BANNER_RULE)
    print("- Respects robots.txt")
    print(f"- Identifies itself as {bot_name}")
    print(f"- Waits at least {request_delay_seconds:g}s between requests")
    print("- Collects public product information only")
    print(_BANNER_RULE)
    print()


def main(
    argv: Sequence[str] | None = None,
    *,
    service: PriceScrapeService | None = None,
    session_factory: Callable[[], Session] | None = None,
    activity_log: ActivityLogger | None = None,
) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_str_env("LOG_LEVEL", "INFO"))

    settings = get_crawl_settings()
    _print_banner(settings.bot_name, settings.request_delay_seconds)

    if activity_log is None:
        activity_log = ActivityLogger.for_directory(
            log_dir=settings.log_dir,
            bot_name=settings.bot_name,
            contact_email=settings.contact_email,
        )

    try:
        if session_factory is None:
            resolve_database_url()
            from db.session import SessionLocal

            session_factory = SessionLocal

        scrape_service = service or PriceScrapeService(settings=settings)
        with session_factory() as db:
            summary = scrape_service.scrape_and_save(
                db=db,
                url=args.url,
                activity_log=activity_log,
                category=args.category,
                max_products=args.max_products,
                index=not args.skip_index,
            )
    except Exception as exc:
        activity_log.error("Fatal error", error=str(exc), error_type=type(exc).__name__)
        print(f"\nScraping failed: {exc}")
        print(f"Activity log: {activity_log.log_path}")
        return 1

    print(json.dumps(asdict(summary), indent=2, default=str, ensure_ascii=False))
    if summary.records_scraped == 0:
        print("\nNo products were extracted")
        print(f"Activity log: {activity_log.log_path}")
        return 1

    print(f"\nScraping completed: {summary.records_scraped} scraped, {summary.records_saved} saved")
    print(f"Activity log: {activity_log.log_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
