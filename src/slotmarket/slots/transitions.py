"""Transition tables for the two slot state machines.

The operational axis and the draft axis are resolved independently; an
action that does not concern an axis leaves that axis untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ..exceptions import PreconditionFailedError
from .slots_models import DraftStatus, Slot, SlotStatus


class SlotAction(StrEnum):
    SAVE_DRAFT = "save_draft"
    MARK_READY = "mark_ready"
    APPROVE = "approve"
    REJECT = "reject"
    ENABLE_MAINTENANCE = "enable_maintenance"
    DISABLE_MAINTENANCE = "disable_maintenance"
    REMOVE_PRODUCT = "remove_product"
    SET_FEATURED = "set_featured"
    EXPIRE = "expire"


@dataclass(frozen=True, slots=True)
class Transition:
    action: SlotAction
    slot_from: SlotStatus
    slot_to: SlotStatus
    draft_from: DraftStatus
    draft_to: DraftStatus


def next_slot_status(current: SlotStatus, action: SlotAction) -> SlotStatus:
    """Return the operational status reached by ``action`` from ``current``."""
    match action:
        case SlotAction.ENABLE_MAINTENANCE:
            return SlotStatus.MAINTENANCE
        case SlotAction.DISABLE_MAINTENANCE:
            if current is SlotStatus.MAINTENANCE:
                return SlotStatus.EMPTY
            raise PreconditionFailedError(
                f"slot is {current.value}, maintenance is not enabled"
            )
        case SlotAction.APPROVE:
            if current is SlotStatus.MAINTENANCE:
                raise PreconditionFailedError("slot is under maintenance")
            return SlotStatus.LIVE
        case SlotAction.REMOVE_PRODUCT:
            return SlotStatus.EMPTY
        case SlotAction.EXPIRE:
            if current is not SlotStatus.LIVE:
                raise PreconditionFailedError(f"slot is {current.value}, not live")
            return SlotStatus.EMPTY
        case SlotAction.SET_FEATURED:
            if current is not SlotStatus.LIVE:
                raise PreconditionFailedError(f"slot is {current.value}, not live")
            return SlotStatus.LIVE
        case SlotAction.SAVE_DRAFT | SlotAction.MARK_READY | SlotAction.REJECT:
            return current
    raise ValueError(f"unknown slot action: {action!r}")


def next_draft_status(current: DraftStatus, action: SlotAction) -> DraftStatus:
    """Return the draft status reached by ``action`` from ``current``."""
    match action:
        case SlotAction.SAVE_DRAFT:
            return DraftStatus.DRAFTING
        case SlotAction.MARK_READY:
            if current is DraftStatus.DRAFTING:
                return DraftStatus.READY_TO_PUBLISH
            raise PreconditionFailedError(
                f"draft is {current.value}, expected {DraftStatus.DRAFTING.value}"
            )
        case SlotAction.APPROVE | SlotAction.REJECT:
            if current is DraftStatus.READY_TO_PUBLISH:
                return DraftStatus.EMPTY
            raise PreconditionFailedError(
                f"draft is {current.value}, expected {DraftStatus.READY_TO_PUBLISH.value}"
            )
        case (
            SlotAction.ENABLE_MAINTENANCE
            | SlotAction.DISABLE_MAINTENANCE
            | SlotAction.REMOVE_PRODUCT
            | SlotAction.SET_FEATURED
            | SlotAction.EXPIRE
        ):
            return current
    raise ValueError(f"unknown slot action: {action!r}")


def plan_transition(slot: Slot, action: SlotAction) -> Transition:
    """Validate ``action`` against both axes of ``slot``.

    Raises :class:`PreconditionFailedError` when either axis rejects it.
    """
    draft_to = next_draft_status(slot.draft_status, action)
    slot_to = next_slot_status(slot.slot_status, action)
    return Transition(
        action=action,
        slot_from=slot.slot_status,
        slot_to=slot_to,
        draft_from=slot.draft_status,
        draft_to=draft_to,
    )


__all__ = [
    "SlotAction",
    "Transition",
    "next_draft_status",
    "next_slot_status",
    "plan_transition",
]
