"""Maintenance toggle for the operational axis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .publish_pipeline import retired_columns
from .slots_models import Slot, SlotStatus
from .transitions import SlotAction, next_slot_status


@dataclass(frozen=True, slots=True)
class MaintenancePlan:
    action: SlotAction
    target: SlotStatus
    expected: dict[str, object]
    values: dict[str, Any]
    retires_listing: bool


class MaintenanceGate:
    """Compute the target status and write for a maintenance toggle.

    Draft columns are never part of the write. Enabling force-retires a live
    listing; disabling always lands on ``empty``.
    """

    def plan(self, slot: Slot, *, enabled: bool) -> MaintenancePlan:
        action = (
            SlotAction.ENABLE_MAINTENANCE if enabled else SlotAction.DISABLE_MAINTENANCE
        )
        target = next_slot_status(slot.slot_status, action)
        return MaintenancePlan(
            action=action,
            target=target,
            expected={"slot_status": slot.slot_status, "version": slot.version},
            values=retired_columns(target),
            retires_listing=slot.slot_status is SlotStatus.LIVE,
        )


__all__ = ["MaintenanceGate", "MaintenancePlan"]
