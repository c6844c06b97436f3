"""Lifecycle helpers wiring background tasks for FastAPI startup."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from .db.db_models import utcnow
from .slots.slots_service import SlotTransitionService

logger = logging.getLogger(__name__)


def expire_listings_once(
    service: SlotTransitionService, *, now: datetime | None = None
) -> list[int]:
    """Run a single expiry sweep and return the retired slot ids."""

    result = service.expire_listings(now=now or utcnow())
    if result.error is not None:
        logger.warning(
            "Expiry sweep failed: %s (%s)", result.error.detail, result.error.kind.value
        )
        return []
    return result.value or []


async def run_periodic_expiry_sweep(
    *,
    service: SlotTransitionService,
    shutdown_event: asyncio.Event,
    interval_seconds: float = 300.0,
    clock: Callable[[], datetime] | None = None,
) -> None:
    """Retire listings past ``end_time`` until ``shutdown_event`` is signalled."""

    interval = max(1.0, float(interval_seconds))
    tick = clock or utcnow
    try:
        while not shutdown_event.is_set():
            try:
                expired = await asyncio.to_thread(
                    expire_listings_once, service, now=tick()
                )
            except Exception:  # pragma: no cover - defensive logging
                logger.exception("Expiry sweep iteration failed")
            else:
                if expired:
                    logger.info("Expired %s listings: %s", len(expired), expired)
            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
    except asyncio.CancelledError:  # pragma: no cover - shutdown path
        raise


__all__ = ["expire_listings_once", "run_periodic_expiry_sweep"]
