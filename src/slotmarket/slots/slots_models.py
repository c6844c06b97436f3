"""Slot domain dataclasses and status enumerations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from .. import SLOT_COUNT


class SlotStatus(StrEnum):
    """Operational axis of a slot."""

    EMPTY = "empty"
    LIVE = "live"
    MAINTENANCE = "maintenance"


class DraftStatus(StrEnum):
    """Draft axis of a slot, independent of :class:`SlotStatus`."""

    EMPTY = "empty"
    DRAFTING = "drafting"
    READY_TO_PUBLISH = "ready_to_publish"


class Currency(StrEnum):
    XAF = "XAF"
    USD = "USD"
    EUR = "EUR"


# Content fields shared by the live and the draft column groups
# (``live_<name>`` / ``draft_<name>``).
LISTING_FIELDS: tuple[str, ...] = (
    "name_en",
    "name_fr",
    "description_en",
    "description_fr",
    "price",
    "currency",
    "categories",
    "delivery_options",
    "tags",
    "image_urls",
)
COLLECTION_FIELDS: frozenset[str] = frozenset(
    {"categories", "delivery_options", "tags", "image_urls"}
)


def is_valid_slot_id(slot_id: object) -> bool:
    return (
        isinstance(slot_id, int)
        and not isinstance(slot_id, bool)
        and 1 <= slot_id <= SLOT_COUNT
    )


@dataclass(slots=True)
class DeliveryOption:
    name: str
    price: Decimal | None = None
    estimated_days: int | None = None
    areas: list[str] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "price": str(self.price) if self.price is not None else None,
            "estimated_days": self.estimated_days,
            "areas": list(self.areas),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "DeliveryOption":
        price = data.get("price")
        return cls(
            name=str(data.get("name", "")),
            price=Decimal(str(price)) if price is not None else None,
            estimated_days=data.get("estimated_days"),
            areas=[str(area) for area in data.get("areas") or []],
        )


@dataclass(slots=True)
class ListingContent:
    """Product content as it appears in either the live or the draft group."""

    name_en: str | None = None
    name_fr: str | None = None
    description_en: str | None = None
    description_fr: str | None = None
    price: Decimal | None = None
    currency: str | None = None
    categories: list[str] | None = None
    delivery_options: list[DeliveryOption] | None = None
    tags: list[str] | None = None
    image_urls: list[str] | None = None

    def is_blank(self) -> bool:
        return all(getattr(self, name) is None for name in LISTING_FIELDS)

    def has_name(self) -> bool:
        return bool(self.name_en or self.name_fr)


@dataclass(slots=True)
class Slot:
    id: int
    slot_status: SlotStatus
    draft_status: DraftStatus
    version: int = 1
    live_seller_id: str | None = None
    live: ListingContent = field(default_factory=ListingContent)
    start_time: datetime | None = None
    end_time: datetime | None = None
    featured: bool = False
    view_count: int = 0
    draft_seller_contact: str | None = None
    draft: ListingContent = field(default_factory=ListingContent)
    draft_updated_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def live_content_complete(self) -> bool:
        """True when every live field a published listing needs is populated."""
        live = self.live
        return (
            self.live_seller_id is not None
            and live.has_name()
            and live.price is not None
            and live.currency is not None
            and all(getattr(live, name) is not None for name in COLLECTION_FIELDS)
            and self.start_time is not None
            and self.end_time is not None
            and self.end_time > self.start_time
        )

    def live_content_cleared(self) -> bool:
        return (
            self.live_seller_id is None
            and self.live.is_blank()
            and self.start_time is None
            and self.end_time is None
            and self.view_count == 0
        )

    def draft_cleared(self) -> bool:
        return (
            self.draft.is_blank()
            and self.draft_seller_contact is None
            and self.draft_updated_at is None
        )


@dataclass(slots=True)
class SlotFilter:
    slot_status: SlotStatus | None = None
    draft_status: DraftStatus | None = None
    featured: bool | None = None
    seller_id: str | None = None
    search: str | None = None
    page: int = 1
    page_size: int = 25


@dataclass(slots=True)
class SlotPage:
    items: list[Slot]
    total: int
    page: int
    page_size: int


__all__ = [
    "COLLECTION_FIELDS",
    "Currency",
    "DeliveryOption",
    "DraftStatus",
    "LISTING_FIELDS",
    "ListingContent",
    "Slot",
    "SlotFilter",
    "SlotPage",
    "SlotStatus",
    "is_valid_slot_id",
]
