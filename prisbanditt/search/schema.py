"""
Search collection schema and product document model.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


def products_collection_schema(name: str = "products") -> dict[str, Any]:
    """
    Collection definition for denormalized product documents.
    """

    return {
        "name": name,
        "fields": [
            {"name": "id", "type": "string", "facet": False},
            {"name": "name", "type": "string", "facet": False},
            {"name": "slug", "type": "string", "facet": False},
            {"name": "brand", "type": "string", "facet": True, "optional": True},
            {"name": "ean", "type": "string", "facet": False, "optional": True},
            {"name": "category_name", "type": "string", "facet": True, "optional": True},
            {"name": "category_slug", "type": "string", "facet": False, "optional": True},
            {"name": "image_url", "type": "string", "facet": False, "optional": True},
            {"name": "description", "type": "string", "facet": False, "optional": True},
            {"name": "lowest_price", "type": "float", "facet": False, "optional": True},
            {"name": "highest_price", "type": "float", "facet": False, "optional": True},
            {"name": "average_price", "type": "float", "facet": False, "optional": True},
            {"name": "retailers", "type": "string[]", "facet": True, "optional": True},
            {"name": "in_stock", "type": "bool", "facet": True, "optional": True},
            {"name": "created_at", "type": "int64", "facet": False},
            {"name": "updated_at", "type": "int64", "facet": False},
        ],
        "default_sorting_field": "created_at",
    }


@dataclass(frozen=True)
class ProductSearchDocument:
    """
    One product as indexed in the search collection.
    """

    id: str
    name: str
    slug: str
    created_at: int
    updated_at: int
    brand: str | None = None
    ean: str | None = None
    category_name: str | None = None
    category_slug: str | None = None
    image_url: str | None = None
    description: str | None = None
    lowest_price: float | None = None
    highest_price: float | None = None
    average_price: float | None = None
    retailers: list[str] = field(default_factory=list)
    in_stock: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        # Optional fields are omitted rather than sent as null.
        return {key: value for key, value in asdict(self).items() if value is not None}
