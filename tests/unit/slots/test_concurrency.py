from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from slotmarket.sellers.seller_directory import normalize_contact
from slotmarket.slots.slots_models import DraftStatus, SlotStatus
from slotmarket.slots.slots_results import ErrorKind
from slotmarket.slots.slots_service import SlotTransitionService

pytestmark = pytest.mark.unit

CONTACTS = {"+237600000000": "seller-1", "+237611111111": "seller-2"}


class BarrierSellerDirectory:
    """Hold every resolver until all racing approvals have read the slot."""

    def __init__(self, parties: int) -> None:
        self._barrier = threading.Barrier(parties, timeout=10)

    def resolve(self, contact: str) -> str:
        self._barrier.wait()
        return CONTACTS[normalize_contact(contact)]


@pytest.fixture
def racing_service(repository, images, audit, stats, clock) -> SlotTransitionService:
    return SlotTransitionService(
        repository,
        seller_directory=BarrierSellerDirectory(parties=2),
        image_cleanup=images,
        audit_log=audit,
        stats=stats,
        clock=clock,
    )


def test_concurrent_approvals_yield_exactly_one_winner(
    racing_service, service, repository, invariants
) -> None:
    service.save_draft(12, {"name_en": "Chair", "price": 5000, "currency": "XAF"})
    service.mark_ready(12)
    attempts = {"+237600000000": 3, "+237611111111": 5}

    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = {
            contact: pool.submit(racing_service.approve, 12, contact, duration_days=days)
            for contact, days in attempts.items()
        }
        results = {contact: future.result(timeout=30) for contact, future in futures.items()}

    winners = [contact for contact, result in results.items() if result.ok]
    losers = [contact for contact, result in results.items() if not result.ok]
    assert len(winners) == 1
    assert len(losers) == 1
    assert results[losers[0]].error.kind is ErrorKind.PRECONDITION_FAILED

    slot = repository.get_slot(12)
    winner = winners[0]
    assert slot.slot_status is SlotStatus.LIVE
    assert slot.draft_status is DraftStatus.EMPTY
    assert slot.live_seller_id == CONTACTS[winner]
    assert slot.end_time - slot.start_time == timedelta(days=attempts[winner])
    invariants(slot)


def test_concurrent_mark_ready_applies_once(service, repository) -> None:
    service.save_draft(20, {"name_en": "Lamp", "price": 10, "currency": "USD"})
    start = threading.Barrier(4, timeout=10)

    def attempt():
        start.wait()
        return service.mark_ready(20)

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: attempt(), range(4)))

    assert sum(1 for result in results if result.ok) == 1
    assert all(
        result.error.kind is ErrorKind.PRECONDITION_FAILED
        for result in results
        if not result.ok
    )
    assert repository.get_slot(20).version == 3


def test_concurrent_views_report_distinct_counts(service, repository, make_live) -> None:
    make_live(21)
    start = threading.Barrier(6, timeout=10)

    def attempt():
        start.wait()
        return service.record_view(21)

    with ThreadPoolExecutor(max_workers=6) as pool:
        results = list(pool.map(lambda _: attempt(), range(6)))

    assert all(result.ok for result in results)
    assert sorted(result.value for result in results) == [1, 2, 3, 4, 5, 6]
    assert repository.get_slot(21).view_count == 6
