"""Routes for slot statistics."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..slots.slots_api import unwrap
from ..slots.slots_service import SlotTransitionService

router = APIRouter(prefix="/api/stats", tags=["stats"])


def get_slot_service(request: Request) -> SlotTransitionService:
    try:
        return request.app.state.slot_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("SlotTransitionService is not configured") from exc


@router.get("")
def slot_stats(
    service: SlotTransitionService = Depends(get_slot_service),
) -> dict[str, int]:
    """Return live/maintenance/available counters (may lag by the cache TTL)."""
    return unwrap(service.get_stats()).as_dict()
