"""
db/models/retailer.py

Retailer model: one web shop whose prices are crawled.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin, UuidPrimaryKeyMixin

if TYPE_CHECKING:
    from db.models.product_retailer import ProductRetailer


class Retailer(UuidPrimaryKeyMixin, Base, TimestampMixin):
    __tablename__ = "retailers"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(80),
        nullable=False,
        unique=True,
        comment="Stable identifier used by scrapers, e.g. 'elkjop'",
    )
    logo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    website_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    listings: Mapped[list["ProductRetailer"]] = relationship(
        "ProductRetailer",
        back_populates="retailer",
    )
