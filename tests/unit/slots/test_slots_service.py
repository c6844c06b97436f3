from __future__ import annotations

import threading
from datetime import timedelta
from decimal import Decimal

import pytest

from slotmarket.slots.deadlines import Deadline
from slotmarket.slots.slots_models import DraftStatus, SlotFilter, SlotStatus
from slotmarket.slots.slots_results import ErrorKind

pytestmark = pytest.mark.unit

SELLER_CONTACT = "+237600000000"


def test_draft_to_live_happy_path(service, invariants, audit) -> None:
    saved = service.save_draft(7, {"name_en": "Chair", "price": 5000, "currency": "XAF"})
    assert saved.ok
    assert saved.value.draft_status is DraftStatus.DRAFTING

    ready = service.mark_ready(7)
    assert ready.ok
    assert ready.value.draft_status is DraftStatus.READY_TO_PUBLISH

    approved = service.approve(7, SELLER_CONTACT, actor_id="admin-1")

    assert approved.ok, approved.error
    slot = approved.value
    assert slot.slot_status is SlotStatus.LIVE
    assert slot.live.name_en == "Chair"
    assert slot.live.price == Decimal("5000")
    assert slot.live_seller_id == "seller-1"
    assert slot.draft_status is DraftStatus.EMPTY
    assert slot.end_time - slot.start_time == timedelta(days=7)
    invariants(slot)
    assert audit.actions(7) == ["save_draft", "mark_ready", "approve"]
    assert audit.entries[-1][2] == "admin-1"


def test_maintenance_force_retires_and_disable_is_lossy(
    service, make_live, images, invariants
) -> None:
    make_live(3)

    enabled = service.set_maintenance(3, True)
    assert enabled.ok
    assert enabled.value.slot_status is SlotStatus.MAINTENANCE
    invariants(enabled.value)
    assert images.cleared == [3]

    disabled = service.set_maintenance(3, False)
    assert disabled.ok
    assert disabled.value.slot_status is SlotStatus.EMPTY
    invariants(disabled.value)


def test_maintenance_keeps_pending_draft(service, make_ready) -> None:
    make_ready(6)

    result = service.set_maintenance(6, True)

    assert result.ok
    assert result.value.draft_status is DraftStatus.READY_TO_PUBLISH
    assert result.value.draft.name_en == "Chair"


def test_disable_maintenance_on_empty_slot_fails(service, repository) -> None:
    result = service.set_maintenance(4, False)

    assert result.error.kind is ErrorKind.PRECONDITION_FAILED
    assert repository.get_slot(4).version == 1


def test_list_live_slots_returns_exactly_the_live_ones(service, make_live, invariants) -> None:
    for slot_id in (2, 5, 9):
        make_live(slot_id)

    result = service.list_slots(SlotFilter(slot_status=SlotStatus.LIVE))

    assert result.ok
    assert [slot.id for slot in result.value.items] == [2, 5, 9]
    for slot in result.value.items:
        invariants(slot)


def test_list_slots_clamps_page_size(service) -> None:
    result = service.list_slots(SlotFilter(page_size=1000))

    assert result.value.page_size == 100
    assert len(result.value.items) == 25


def test_list_slots_rejects_bad_page(service) -> None:
    assert service.list_slots(SlotFilter(page=0)).error.kind is ErrorKind.INVALID_INPUT


def test_remove_product_succeeds_when_cleanup_fails(
    service, make_live, images, invariants
) -> None:
    make_live(5)
    images.fail = True

    result = service.remove_product(5)

    assert result.ok
    assert images.cleared == [5]
    assert result.value.slot_status is SlotStatus.EMPTY
    invariants(result.value)


def test_remove_product_is_idempotent(service, make_live) -> None:
    make_live(5)

    first = service.remove_product(5)
    second = service.remove_product(5)

    assert first.ok and second.ok
    assert second.value.slot_status is SlotStatus.EMPTY


def test_audit_failure_does_not_fail_committed_write(service, audit) -> None:
    audit.fail = True

    result = service.save_draft(1, {"name_en": "Lamp"})

    assert result.ok
    assert result.value.draft.name_en == "Lamp"


@pytest.mark.parametrize("slot_id", [0, 26, -1])
def test_out_of_range_slot_id_is_invalid_input(service, slot_id: int) -> None:
    result = service.save_draft(slot_id, {"name_en": "Chair"})

    assert result.error.kind is ErrorKind.INVALID_INPUT


def test_mark_ready_on_empty_draft_is_precondition_failure(service, repository) -> None:
    result = service.mark_ready(11)

    assert result.error.kind is ErrorKind.PRECONDITION_FAILED
    slot = repository.get_slot(11)
    assert slot.draft_status is DraftStatus.EMPTY
    assert slot.version == 1


def test_mark_ready_with_incomplete_draft_is_invalid_input(service, repository) -> None:
    service.save_draft(11, {"name_en": "Chair"})

    result = service.mark_ready(11)

    assert result.error.kind is ErrorKind.INVALID_INPUT
    assert repository.get_slot(11).draft_status is DraftStatus.DRAFTING


def test_approve_in_maintenance_fails_regardless_of_draft(service, make_ready) -> None:
    make_ready(8)
    service.set_maintenance(8, True)

    result = service.approve(8, SELLER_CONTACT)

    assert result.error.kind is ErrorKind.PRECONDITION_FAILED


def test_approve_with_unknown_contact_is_upstream_failure(service, make_ready, repository) -> None:
    make_ready(8)

    result = service.approve(8, "+10000000000")

    assert result.error.kind is ErrorKind.UPSTREAM_RESOLUTION_FAILED
    assert repository.get_slot(8).draft_status is DraftStatus.READY_TO_PUBLISH


def test_approve_with_malformed_contact_is_invalid_input(service, make_ready) -> None:
    make_ready(8)

    assert service.approve(8, "abc").error.kind is ErrorKind.INVALID_INPUT


def test_approve_on_live_slot_replaces_listing(service, make_live, make_ready, invariants) -> None:
    make_live(13)
    make_ready(13, name_en="Table", price=70, currency="EUR")

    result = service.approve(13, "+237611111111", duration_days=3)

    assert result.ok
    assert result.value.live.name_en == "Table"
    assert result.value.live_seller_id == "seller-2"
    assert result.value.end_time - result.value.start_time == timedelta(days=3)
    invariants(result.value)


def test_reject_discards_draft_and_audits_reason(service, make_ready, audit, invariants) -> None:
    make_ready(14)

    result = service.reject(14, reason="blurry photos", actor_id="mod")

    assert result.ok
    assert result.value.draft_status is DraftStatus.EMPTY
    invariants(result.value)
    action, slot_id, actor, metadata = audit.entries[-1]
    assert (action, slot_id, actor) == ("reject", 14, "mod")
    assert metadata == {"reason": "blurry photos"}


def test_reject_requires_ready_draft(service) -> None:
    service.save_draft(14, {"name_en": "Chair"})

    assert service.reject(14).error.kind is ErrorKind.PRECONDITION_FAILED


def test_save_draft_on_ready_draft_returns_to_drafting(service, make_ready) -> None:
    make_ready(15)

    result = service.save_draft(15, {"price": 6000})

    assert result.value.draft_status is DraftStatus.DRAFTING
    assert result.value.draft.price == Decimal("6000")
    assert result.value.draft.name_en == "Chair"


def test_save_draft_with_no_fields_is_invalid(service) -> None:
    assert service.save_draft(15, {}).error.kind is ErrorKind.INVALID_INPUT


def test_sub_cent_price_rejected_instead_of_rounded(service, repository) -> None:
    result = service.save_draft(4, {"name_en": "Pin", "price": "0.004", "currency": "XAF"})

    assert result.error.kind is ErrorKind.INVALID_INPUT
    assert "decimal places" in result.error.detail
    assert repository.get_slot(4).draft_status is DraftStatus.EMPTY


def test_set_featured_and_record_view_need_live(service, make_live) -> None:
    assert service.set_featured(16, True).error.kind is ErrorKind.PRECONDITION_FAILED
    assert service.record_view(16).error.kind is ErrorKind.PRECONDITION_FAILED

    make_live(16)
    featured = service.set_featured(16, True)
    views = [service.record_view(16).value for _ in range(3)]

    assert featured.value.featured is True
    assert views == [1, 2, 3]


def test_expired_deadline_cancels_before_write(service, repository) -> None:
    cancel = threading.Event()
    cancel.set()

    result = service.save_draft(17, {"name_en": "Chair"}, deadline=Deadline(cancel_event=cancel))

    assert result.error.kind is ErrorKind.CANCELLED
    assert result.error.kind.retryable
    assert repository.get_slot(17).draft_status is DraftStatus.EMPTY


def test_deadline_in_the_past_cancels(service, clock) -> None:
    deadline = Deadline(expires_at=clock() - timedelta(seconds=1))
    service.save_draft(17, {"name_en": "Chair", "price": 1, "currency": "USD"})

    result = service.mark_ready(17, deadline=deadline)

    assert result.error.kind is ErrorKind.CANCELLED


def test_stats_cache_invalidated_after_mutation(service, make_live) -> None:
    assert service.get_stats().value.live == 0

    make_live(1)

    stats = service.get_stats().value
    assert stats.live == 1
    assert stats.available == 24
    assert stats.total == 25


def test_unexpected_errors_become_unknown(service, sellers) -> None:
    def explode(contact):
        raise RuntimeError("boom")

    sellers.resolve = explode
    service.save_draft(18, {"name_en": "Chair", "price": 1, "currency": "USD"})
    service.mark_ready(18)

    result = service.approve(18, SELLER_CONTACT)

    assert result.error.kind is ErrorKind.UNKNOWN
