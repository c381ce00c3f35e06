"""
db/models/price.py

Append-only price observation log. One row per scrape, never updated.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, UuidPrimaryKeyMixin, utcnow

if TYPE_CHECKING:
    from db.models.product_retailer import ProductRetailer

_MONEY = Numeric(12, 2, asdecimal=False)


class Price(UuidPrimaryKeyMixin, Base):
    __tablename__ = "prices"

    product_retailer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("product_retailers.id", ondelete="CASCADE"),
        nullable=False,
    )
    price: Mapped[float] = mapped_column(_MONEY, nullable=False)
    shipping_cost: Mapped[float | None] = mapped_column(_MONEY, nullable=True)
    total_price: Mapped[float] = mapped_column(
        _MONEY,
        nullable=False,
        comment="price + shipping_cost",
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="NOK")
    scraped_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    previous_price: Mapped[float | None] = mapped_column(_MONEY, nullable=True)
    price_change: Mapped[float | None] = mapped_column(_MONEY, nullable=True)
    price_change_percent: Mapped[float | None] = mapped_column(Numeric(7, 2, asdecimal=False), nullable=True)

    listing: Mapped["ProductRetailer"] = relationship("ProductRetailer", back_populates="prices")

    __table_args__ = (
        Index("ix_prices_product_retailer_scraped_at", "product_retailer_id", "scraped_at"),
    )
