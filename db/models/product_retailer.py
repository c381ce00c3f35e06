"""
db/models/product_retailer.py

Product x retailer listing: where a product is sold and its stock status.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, UuidPrimaryKeyMixin, utcnow

if TYPE_CHECKING:
    from db.models.price import Price
    from db.models.product import Product
    from db.models.retailer import Retailer


class ProductRetailer(UuidPrimaryKeyMixin, Base):
    __tablename__ = "product_retailers"

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    retailer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("retailers.id", ondelete="CASCADE"),
        nullable=False,
    )
    product_url: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)
    stock_status: Mapped[str] = mapped_column(String(255), nullable=False, default="unknown")
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_checked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    product: Mapped["Product"] = relationship("Product", back_populates="listings")
    retailer: Mapped["Retailer"] = relationship("Retailer", back_populates="listings")
    prices: Mapped[list["Price"]] = relationship(
        "Price",
        back_populates="listing",
        order_by="Price.scraped_at",
    )

    __table_args__ = (
        Index("ix_product_retailers_product_id", "product_id"),
        Index("ix_product_retailers_retailer_id", "retailer_id"),
    )
