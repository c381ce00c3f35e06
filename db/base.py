"""
db/base.py

Declarative base and the column mixins shared by the catalog tables.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    Declarative base for the price catalog.

    UUID columns use the generic Uuid type so the schema also builds on
    SQLite in tests; PostgreSQL stores them natively.
    """

    type_annotation_map = {uuid.UUID: Uuid(as_uuid=True)}


class UuidPrimaryKeyMixin:
    """UUID primary key generated client-side on insert."""

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)


class TimestampMixin:
    """
    created_at / updated_at for rows that are edited in place (retailers,
    products). Price rows are append-only and carry scraped_at instead.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )
