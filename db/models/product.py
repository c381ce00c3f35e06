"""
db/models/product.py

Product model: one catalog item, shared across retailers.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin, UuidPrimaryKeyMixin

if TYPE_CHECKING:
    from db.models.category import Category
    from db.models.product_retailer import ProductRetailer


class Product(UuidPrimaryKeyMixin, Base, TimestampMixin):
    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    ean: Mapped[str | None] = mapped_column(
        String(32),
        nullable=True,
        comment="GTIN-13 / EAN used to match the same product across retailers",
    )
    brand: Mapped[str | None] = mapped_column(String(120), nullable=True)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    category: Mapped["Category | None"] = relationship("Category")
    listings: Mapped[list["ProductRetailer"]] = relationship(
        "ProductRetailer",
        back_populates="product",
    )

    __table_args__ = (
        Index("ix_products_ean", "ean"),
        Index("ix_products_brand", "brand"),
    )
