"""Pydantic schemas for the slot admin API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from .publish_pipeline import MAX_DURATION_DAYS
from .slots_models import DeliveryOption, ListingContent, Slot, SlotPage


class DeliveryOptionPayload(BaseModel):
    name: str = Field(..., min_length=1)
    price: Decimal | None = None
    estimated_days: int | None = Field(default=None, ge=0)
    areas: list[str] = Field(default_factory=list)


class ListingPayload(BaseModel):
    name_en: str | None = None
    name_fr: str | None = None
    description_en: str | None = None
    description_fr: str | None = None
    price: Decimal | None = None
    currency: str | None = None
    categories: list[str] | None = None
    delivery_options: list[DeliveryOptionPayload] | None = None
    tags: list[str] | None = None
    image_urls: list[str] | None = None


class DraftSaveRequest(BaseModel):
    """Partial draft update; only the keys present in the body are written."""

    model_config = ConfigDict(extra="forbid")

    seller_contact: str | None = None
    name_en: str | None = None
    name_fr: str | None = None
    description_en: str | None = None
    description_fr: str | None = None
    price: Decimal | None = None
    currency: str | None = None
    categories: list[str] | None = None
    delivery_options: list[DeliveryOptionPayload] | None = None
    tags: list[str] | None = None
    image_urls: list[str] | None = None


class ApproveRequest(BaseModel):
    seller_contact: str = Field(..., min_length=1)
    duration_days: int | None = Field(default=None, ge=1, le=MAX_DURATION_DAYS)


class RejectRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class MaintenanceRequest(BaseModel):
    enabled: bool


class FeaturedRequest(BaseModel):
    featured: bool


class BatchMaintenanceRequest(BaseModel):
    slot_ids: list[int]
    enabled: bool


class BatchRemoveRequest(BaseModel):
    slot_ids: list[int]


class SlotResponse(BaseModel):
    slot_id: int
    slot_status: str
    draft_status: str
    version: int
    live_seller_id: str | None
    live: ListingPayload
    start_time: datetime | None
    end_time: datetime | None
    featured: bool
    view_count: int
    draft_seller_contact: str | None
    draft: ListingPayload
    draft_updated_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_domain(cls, slot: Slot) -> "SlotResponse":
        return cls(
            slot_id=slot.id,
            slot_status=slot.slot_status.value,
            draft_status=slot.draft_status.value,
            version=slot.version,
            live_seller_id=slot.live_seller_id,
            live=_listing(slot.live),
            start_time=slot.start_time,
            end_time=slot.end_time,
            featured=slot.featured,
            view_count=slot.view_count,
            draft_seller_contact=slot.draft_seller_contact,
            draft=_listing(slot.draft),
            draft_updated_at=slot.draft_updated_at,
            updated_at=slot.updated_at,
        )


class SlotPageResponse(BaseModel):
    items: list[SlotResponse]
    total: int
    page: int
    page_size: int

    @classmethod
    def from_domain(cls, page: SlotPage) -> "SlotPageResponse":
        return cls(
            items=[SlotResponse.from_domain(slot) for slot in page.items],
            total=page.total,
            page=page.page,
            page_size=page.page_size,
        )


class ViewCountResponse(BaseModel):
    slot_id: int
    view_count: int


class BatchItemErrorPayload(BaseModel):
    slot_id: int
    failure_reason: str
    details: str


class BatchResponse(BaseModel):
    overall_success: bool
    success_count: int
    failure_count: int
    errors: list[BatchItemErrorPayload]


def _option(option: DeliveryOption) -> DeliveryOptionPayload:
    return DeliveryOptionPayload(
        name=option.name,
        price=option.price,
        estimated_days=option.estimated_days,
        areas=list(option.areas),
    )


def _listing(content: ListingContent) -> ListingPayload:
    return ListingPayload(
        name_en=content.name_en,
        name_fr=content.name_fr,
        description_en=content.description_en,
        description_fr=content.description_fr,
        price=content.price,
        currency=content.currency,
        categories=content.categories,
        delivery_options=(
            [_option(option) for option in content.delivery_options]
            if content.delivery_options is not None
            else None
        ),
        tags=content.tags,
        image_urls=content.image_urls,
    )
