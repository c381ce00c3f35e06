"""
tests/test_products_api.py

Product API routes against SQLite with a stub search client.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from db.session import build_session_factory, get_db
from prisbanditt.api.routers import products_router
from prisbanditt.domain.products import ScrapedRecord
from prisbanditt.repositories.catalog_repository import CatalogRepository
from prisbanditt.search.client import SearchIndexError
from prisbanditt.services.catalog_service import CatalogService, get_catalog_service

NOW = datetime.now(timezone.utc)


class StubSearchClient:
    def __init__(self, response: dict | Exception) -> None:
        self.response = response
        self.parameters: dict = {}

    def search(self, parameters: dict) -> dict:
        self.parameters = parameters
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def seed(session: Session) -> None:
    repository = CatalogRepository(session)
    offers = [
        ("elkjop", "Elkjøp", "https://www.elkjop.no/product/tv/1", 12990.0, 0.0),
        ("power", "Power", "https://www.power.no/tv/p-1", 12490.0, 99.0),
    ]
    for slug, name, url, price, shipping in offers:
        retailer = repository.get_or_create_retailer(slug=slug, name=name)
        for days_ago, delta in ((200, 1000.0), (20, 500.0), (0, 0.0)):
            item = ScrapedRecord(
                name="Samsung QLED 55",
                price=price + delta,
                source_url=url,
                retailer_id=slug,
                scraped_at=NOW - timedelta(days=days_ago),
                brand="Samsung",
                ean="7318790000001",
                shipping_cost=shipping,
                stock_status="På lager",
            )
            listing, _ = repository.upsert_listing(item, retailer=retailer)
            repository.record_price(listing, item)
    session.commit()


def build_client(sqlite_engine, search_client: StubSearchClient) -> TestClient:
    factory = build_session_factory(sqlite_engine)

    def override_db() -> Iterator[Session]:
        with factory() as session:
            yield session

    app = FastAPI()
    app.include_router(products_router)
    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_catalog_service] = lambda: CatalogService(search_client=search_client)
    return TestClient(app)


@pytest.fixture()
def seeded_client(sqlite_engine, db_session: Session) -> TestClient:
    seed(db_session)
    return build_client(sqlite_engine, StubSearchClient({}))


def test_product_detail_lists_offers_cheapest_first(seeded_client: TestClient) -> None:
    response = seeded_client.get("/products/samsung-qled-55")

    assert response.status_code == 200
    body = response.json()
    assert [offer["retailer_slug"] for offer in body["offers"]] == ["power", "elkjop"]
    assert body["lowest_price"] == 12490.0
    assert body["highest_price"] == 12990.0
    assert body["average_price"] == 12740.0
    assert body["savings"] == 401.0
    assert body["in_stock"] is True


def test_unknown_product_is_404(seeded_client: TestClient) -> None:
    assert seeded_client.get("/products/nope").status_code == 404
    assert seeded_client.get("/products/nope/price-history").status_code == 404


def test_price_history_window(seeded_client: TestClient) -> None:
    default_window = seeded_client.get("/products/samsung-qled-55/price-history").json()
    full = seeded_client.get("/products/samsung-qled-55/price-history", params={"days": 365}).json()

    assert default_window["days"] == 90
    assert len(default_window["points"]) == 4
    assert len(full["points"]) == 6
    timestamps = [point["scraped_at"] for point in full["points"]]
    assert timestamps == sorted(timestamps)


def test_invalid_days_rejected(seeded_client: TestClient) -> None:
    response = seeded_client.get("/products/samsung-qled-55/price-history", params={"days": 0})

    assert response.status_code == 422


def test_search_maps_hits_and_facets(sqlite_engine) -> None:
    search_client = StubSearchClient(
        {
            "found": 1,
            "page": 1,
            "hits": [
                {
                    "document": {
                        "id": "abc",
                        "name": "Samsung QLED 55",
                        "slug": "samsung-qled-55",
                        "brand": "Samsung",
                        "lowest_price": 12490.0,
                        "retailers": ["Elkjøp", "Power"],
                        "in_stock": True,
                        "created_at": 1735689600,
                        "updated_at": 1735689600,
                    }
                }
            ],
            "facet_counts": [
                {"field_name": "brand", "counts": [{"value": "Samsung", "count": 1}]},
            ],
        }
    )
    client = build_client(sqlite_engine, search_client)

    response = client.get(
        "/products/search",
        params={"q": "qled", "max_price": 15000, "in_stock": "true", "brand": "Samsung,LG"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["found"] == 1
    assert body["hits"][0]["slug"] == "samsung-qled-55"
    assert body["hits"][0]["created_at"].startswith("2025-01-01")
    assert body["facets"][0]["counts"][0] == {"value": "Samsung", "count": 1}
    assert search_client.parameters["filter_by"] == (
        "lowest_price:<=15000.0 && in_stock:true && brand:[`Samsung`,`LG`]"
    )


def test_search_rejects_unknown_sort(sqlite_engine) -> None:
    client = build_client(sqlite_engine, StubSearchClient({}))

    assert client.get("/products/search", params={"sort": "cheapest"}).status_code == 400


def test_search_rejects_inverted_price_range(sqlite_engine) -> None:
    client = build_client(sqlite_engine, StubSearchClient({}))

    response = client.get("/products/search", params={"min_price": 500, "max_price": 100})

    assert response.status_code == 400


def test_search_outage_is_503(sqlite_engine) -> None:
    client = build_client(sqlite_engine, StubSearchClient(SearchIndexError("down", status_code=503)))

    assert client.get("/products/search").status_code == 503


def test_autocomplete_returns_prefix_suggestions(sqlite_engine) -> None:
    search_client = StubSearchClient(
        {
            "hits": [
                {
                    "document": {
                        "id": "abc",
                        "name": "Samsung QLED 55",
                        "slug": "samsung-qled-55",
                        "brand": "Samsung",
                        "created_at": 1735689600,
                        "updated_at": 1735689600,
                    }
                }
            ]
        }
    )
    client = build_client(sqlite_engine, search_client)

    response = client.get("/products/autocomplete", params={"q": "sams", "limit": 3})

    assert response.status_code == 200
    body = response.json()
    assert body["query"] == "sams"
    assert [hit["slug"] for hit in body["suggestions"]] == ["samsung-qled-55"]
    assert search_client.parameters["q"] == "sams"
    assert search_client.parameters["query_by"] == "name,brand"
    assert search_client.parameters["per_page"] == 3
    assert search_client.parameters["prefix"] == "true"


def test_autocomplete_requires_query(sqlite_engine) -> None:
    client = build_client(sqlite_engine, StubSearchClient({}))

    assert client.get("/products/autocomplete").status_code == 422


def test_autocomplete_outage_is_503(sqlite_engine) -> None:
    client = build_client(sqlite_engine, StubSearchClient(SearchIndexError("down", status_code=503)))

    assert client.get("/products/autocomplete", params={"q": "tv"}).status_code == 503
