from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from slotmarket.exceptions import InvalidInputError, PreconditionFailedError
from slotmarket.slots.maintenance_gate import MaintenanceGate
from slotmarket.slots.publish_pipeline import PublishPipeline
from slotmarket.slots.slots_models import (
    DeliveryOption,
    DraftStatus,
    ListingContent,
    Slot,
    SlotStatus,
)
from slotmarket.slots.transitions import SlotAction

pytestmark = pytest.mark.unit

NOW = datetime(2026, 3, 1, 12, 0, 0)


def ready_slot(**overrides) -> Slot:
    slot = Slot(
        id=12,
        slot_status=SlotStatus.EMPTY,
        draft_status=DraftStatus.READY_TO_PUBLISH,
        version=4,
        draft=ListingContent(
            name_en="Chair",
            price=Decimal("5000"),
            currency="XAF",
            tags=["wood"],
            delivery_options=[DeliveryOption(name="Pickup")],
        ),
        draft_seller_contact="+237600000000",
        draft_updated_at=NOW - timedelta(hours=1),
    )
    for key, value in overrides.items():
        setattr(slot, key, value)
    return slot


def test_build_copies_draft_and_clears_it_in_one_mapping() -> None:
    values = PublishPipeline().build(
        ready_slot(), seller_id="seller-1", now=NOW, duration_days=7
    )

    assert values["live_name_en"] == "Chair"
    assert values["live_price"] == Decimal("5000")
    assert values["live_tags"] == ["wood"]
    assert values["live_delivery_options"][0]["name"] == "Pickup"
    assert values["live_categories"] == []
    assert values["live_image_urls"] == []
    assert values["live_seller_id"] == "seller-1"
    assert values["slot_status"] is SlotStatus.LIVE
    assert values["end_time"] - values["start_time"] == timedelta(days=7)
    assert values["featured"] is False
    assert values["view_count"] == 0

    assert values["draft_status"] is DraftStatus.EMPTY
    assert values["draft_name_en"] is None
    assert values["draft_seller_contact"] is None
    assert values["draft_updated_at"] is None


def test_expected_guards_draft_status_and_version() -> None:
    expected = PublishPipeline().expected(ready_slot())

    assert expected["draft_status"] is DraftStatus.READY_TO_PUBLISH
    assert set(expected["slot_status"]) == {SlotStatus.EMPTY, SlotStatus.LIVE}
    assert expected["version"] == 4


@pytest.mark.parametrize("days", [0, 91, -3])
def test_build_rejects_out_of_range_duration(days: int) -> None:
    with pytest.raises(InvalidInputError, match="duration_days"):
        PublishPipeline().build(ready_slot(), seller_id="s", now=NOW, duration_days=days)


def test_build_rejects_incomplete_draft() -> None:
    slot = ready_slot(draft=ListingContent(name_en="Chair"))

    with pytest.raises(InvalidInputError, match="price"):
        PublishPipeline().build(slot, seller_id="s", now=NOW, duration_days=7)


def test_maintenance_gate_retires_live_listing_without_touching_draft() -> None:
    slot = ready_slot(slot_status=SlotStatus.LIVE)

    plan = MaintenanceGate().plan(slot, enabled=True)

    assert plan.action is SlotAction.ENABLE_MAINTENANCE
    assert plan.target is SlotStatus.MAINTENANCE
    assert plan.retires_listing is True
    assert plan.expected == {"slot_status": SlotStatus.LIVE, "version": 4}
    assert plan.values["live_name_en"] is None
    assert plan.values["featured"] is False
    assert not any(key.startswith("draft_") for key in plan.values)


def test_maintenance_gate_disable_needs_maintenance() -> None:
    gate = MaintenanceGate()
    plan = gate.plan(ready_slot(slot_status=SlotStatus.MAINTENANCE), enabled=False)

    assert plan.target is SlotStatus.EMPTY
    assert plan.retires_listing is False

    with pytest.raises(PreconditionFailedError):
        gate.plan(ready_slot(slot_status=SlotStatus.EMPTY), enabled=False)
