"""Apply a single-slot operation to a list of slots."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .slots_models import Slot
from .slots_results import (
    BatchItemError,
    BatchResult,
    ErrorKind,
    OperationError,
    OperationResult,
)
from .slots_service import SlotTransitionService


def _apply_each(
    slot_ids: Sequence[int],
    operation: Callable[[int], OperationResult[Slot]],
) -> BatchResult:
    batch = BatchResult()
    if not slot_ids:
        error = OperationError(kind=ErrorKind.INVALID_INPUT, detail="no slot ids supplied")
        batch.results.append(OperationResult(error=error))
        batch.errors.append(BatchItemError(slot_id=-1, error=error))
        return batch

    # Duplicates would race against their own writes.
    for slot_id in dict.fromkeys(slot_ids):
        result = operation(slot_id)
        batch.results.append(result)
        if result.error is not None:
            batch.errors.append(BatchItemError(slot_id=slot_id, error=result.error))
    return batch


def batch_set_maintenance(
    service: SlotTransitionService,
    slot_ids: Sequence[int],
    enabled: bool,
    *,
    actor_id: str | None = None,
) -> BatchResult:
    return _apply_each(
        slot_ids,
        lambda slot_id: service.set_maintenance(slot_id, enabled, actor_id=actor_id),
    )


def batch_remove_products(
    service: SlotTransitionService,
    slot_ids: Sequence[int],
    *,
    actor_id: str | None = None,
) -> BatchResult:
    return _apply_each(
        slot_ids,
        lambda slot_id: service.remove_product(slot_id, actor_id=actor_id),
    )


__all__ = ["batch_remove_products", "batch_set_maintenance"]
