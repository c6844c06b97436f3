from __future__ import annotations

import pytest

from slotmarket.slots.slots_batch import batch_remove_products, batch_set_maintenance
from slotmarket.slots.slots_models import SlotStatus
from slotmarket.slots.slots_results import ErrorKind

pytestmark = pytest.mark.unit


def test_batch_maintenance_reports_per_slot_outcome(service, repository) -> None:
    batch = batch_set_maintenance(service, [1, 2, 99], True, actor_id="ops")

    assert batch.success_count == 2
    assert batch.failure_count == 1
    assert batch.overall_success is False
    assert [(item.slot_id, item.error.kind) for item in batch.errors] == [
        (99, ErrorKind.INVALID_INPUT)
    ]
    assert repository.get_slot(1).slot_status is SlotStatus.MAINTENANCE
    assert repository.get_slot(2).slot_status is SlotStatus.MAINTENANCE


def test_batch_disable_fails_for_slots_not_in_maintenance(service) -> None:
    service.set_maintenance(3, True)

    batch = batch_set_maintenance(service, [3, 4], False)

    assert batch.success_count == 1
    assert batch.errors[0].slot_id == 4
    assert batch.errors[0].error.kind is ErrorKind.PRECONDITION_FAILED


def test_batch_remove_clears_each_slot_once(service, make_live, images, audit) -> None:
    make_live(5)
    make_live(6)

    batch = batch_remove_products(service, [5, 6, 5], actor_id="ops")

    assert batch.overall_success is True
    assert batch.success_count == 2
    assert images.cleared == [5, 6]
    assert audit.actions(5)[-1] == "remove_product"


def test_empty_batch_is_invalid_input(service) -> None:
    batch = batch_remove_products(service, [])

    assert batch.overall_success is False
    assert batch.failure_count == 1
    assert batch.errors[0].slot_id == -1
    assert batch.errors[0].error.kind is ErrorKind.INVALID_INPUT
