"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Naive UTC timestamp, the representation stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base declarative class."""


class SlotModel(Base):
    __tablename__ = "auction_slot"
    __table_args__ = (
        CheckConstraint("id BETWEEN 1 AND 25", name="ck_auction_slot_id_range"),
        CheckConstraint(
            "slot_status IN ('empty', 'live', 'maintenance')",
            name="ck_auction_slot_status",
        ),
        CheckConstraint(
            "draft_status IN ('empty', 'drafting', 'ready_to_publish')",
            name="ck_auction_slot_draft_status",
        ),
        CheckConstraint(
            "live_currency IN ('XAF', 'USD', 'EUR')", name="ck_auction_slot_live_currency"
        ),
        CheckConstraint(
            "draft_currency IN ('XAF', 'USD', 'EUR')", name="ck_auction_slot_draft_currency"
        ),
        Index("ix_auction_slot_slot_status", "slot_status"),
        Index("ix_auction_slot_draft_status", "draft_status"),
        Index("ix_auction_slot_live_seller_id", "live_seller_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    slot_status: Mapped[str] = mapped_column(String(16), nullable=False, default="empty")

    live_seller_id: Mapped[str | None] = mapped_column(String(64))
    live_name_en: Mapped[str | None] = mapped_column(Text)
    live_name_fr: Mapped[str | None] = mapped_column(Text)
    live_description_en: Mapped[str | None] = mapped_column(Text)
    live_description_fr: Mapped[str | None] = mapped_column(Text)
    live_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    live_currency: Mapped[str | None] = mapped_column(String(3))
    live_categories: Mapped[list[str] | None] = mapped_column(JSON)
    live_delivery_options: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON)
    live_tags: Mapped[list[str] | None] = mapped_column(JSON)
    live_image_urls: Mapped[list[str] | None] = mapped_column(JSON)

    start_time: Mapped[datetime | None] = mapped_column(DateTime)
    end_time: Mapped[datetime | None] = mapped_column(DateTime)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    draft_status: Mapped[str] = mapped_column(String(24), nullable=False, default="empty")
    draft_seller_contact: Mapped[str | None] = mapped_column(String(64))
    draft_name_en: Mapped[str | None] = mapped_column(Text)
    draft_name_fr: Mapped[str | None] = mapped_column(Text)
    draft_description_en: Mapped[str | None] = mapped_column(Text)
    draft_description_fr: Mapped[str | None] = mapped_column(Text)
    draft_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    draft_currency: Mapped[str | None] = mapped_column(String(3))
    draft_categories: Mapped[list[str] | None] = mapped_column(JSON)
    draft_delivery_options: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON)
    draft_tags: Mapped[list[str] | None] = mapped_column(JSON)
    draft_image_urls: Mapped[list[str] | None] = mapped_column(JSON)
    draft_updated_at: Mapped[datetime | None] = mapped_column(DateTime)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class SellerModel(Base):
    __tablename__ = "seller"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    contact: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class AuditLogModel(Base):
    __tablename__ = "admin_audit_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actor_id: Mapped[str | None] = mapped_column(String(64))
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    resource: Mapped[str] = mapped_column(String(32), nullable=False, default="slot")
    resource_id: Mapped[str | None] = mapped_column(String(64), index=True)
    metadata_json: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
