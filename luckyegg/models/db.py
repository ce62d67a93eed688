"""
SQLAlchemy ORM models for local storage.

Catalog, orders, and accounts live in the hosted backend. Only visitor
carts are stored locally, as opaque serialized payloads keyed by cart id.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CartSnapshotDB(Base):
    """
    Persisted cart payload for one storage key.

    `payload` is the JSON array written by the cart store; it is replaced
    wholesale on every cart change.
    """

    __tablename__ = "cart_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    payload: Mapped[str] = mapped_column(Text, default="[]")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<CartSnapshotDB(key={self.key})>"
