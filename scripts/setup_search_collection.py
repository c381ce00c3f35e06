"""
Create the products search collection and optionally index the whole catalog.
"""

from __future__ import annotations

import argparse
import json

from sqlalchemy import select

from db.models import Product
from db.session import SessionLocal
from prisbanditt.config import get_search_settings
from prisbanditt.crawling.logging_utils import configure_logging
from prisbanditt.search import SearchClient, SearchIndexError, SearchIndexer, products_collection_schema


def main() -> int:
    parser = argparse.ArgumentParser(description="Bootstrap the product search collection.")
    parser.add_argument(
        "--reindex",
        action="store_true",
        help="Upsert every catalog product into the collection after creating it.",
    )
    args = parser.parse_args()
    configure_logging()

    settings = get_search_settings()
    if not settings.admin_api_key and not settings.api_key:
        print("Missing TYPESENSE_ADMIN_API_KEY (or TYPESENSE_API_KEY).")
        return 1

    client = SearchClient(settings=settings, admin=True)
    try:
        if not client.health():
            print(f"Search service at {settings.base_url} reported unhealthy.")
            return 1
        created = client.ensure_collection(products_collection_schema(settings.collection))

        indexed = 0
        if args.reindex:
            with SessionLocal() as db:
                product_ids = [str(product_id) for product_id in db.scalars(select(Product.id))]
                indexed = SearchIndexer(client=client).index_products(
                    session=db,
                    product_ids=product_ids,
                ).succeeded
    except SearchIndexError as exc:
        print(f"Search setup failed: {exc}")
        return 1
    finally:
        client.close()

    print(
        json.dumps(
            {"collection": settings.collection, "created": created, "indexed": indexed},
            indent=2,
        )
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
