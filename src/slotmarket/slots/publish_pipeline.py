"""Promotion of a ready draft into the live column group."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any

from ..exceptions import InvalidInputError
from .draft_workspace import DraftWorkspace
from .slots_models import COLLECTION_FIELDS, DraftStatus, Slot, SlotStatus
from .slots_repository import blank_columns, content_columns

MAX_DURATION_DAYS = 90


def retired_columns(target: SlotStatus) -> dict[str, Any]:
    """Column values that wipe the live listing and move the slot to ``target``."""
    values = blank_columns("live")
    values.update(
        live_seller_id=None,
        start_time=None,
        end_time=None,
        featured=False,
        view_count=0,
        slot_status=target,
    )
    return values


@dataclass(slots=True)
class PublishPipeline:
    """Compute the single write that publishes a slot's draft.

    Live fields, timing and the draft reset all land in one value mapping so
    the repository can apply them with one conditional ``UPDATE``.
    """

    workspace: DraftWorkspace = field(default_factory=DraftWorkspace)

    def expected(self, slot: Slot) -> dict[str, object]:
        return {
            "draft_status": DraftStatus.READY_TO_PUBLISH,
            "slot_status": (SlotStatus.EMPTY, SlotStatus.LIVE),
            "version": slot.version,
        }

    def build(
        self,
        slot: Slot,
        *,
        seller_id: str,
        now: datetime,
        duration_days: int,
    ) -> dict[str, Any]:
        if not 1 <= duration_days <= MAX_DURATION_DAYS:
            raise InvalidInputError(
                f"duration_days must be between 1 and {MAX_DURATION_DAYS}"
            )
        self.workspace.ensure_publishable(slot)

        content = replace(slot.draft)
        for name in COLLECTION_FIELDS:
            if getattr(content, name) is None:
                setattr(content, name, [])

        values = content_columns("live", content)
        values.update(
            live_seller_id=seller_id,
            slot_status=SlotStatus.LIVE,
            start_time=now,
            end_time=now + timedelta(days=duration_days),
            featured=False,
            view_count=0,
        )
        values.update(self.workspace.cleared())
        return values


__all__ = ["MAX_DURATION_DAYS", "PublishPipeline", "retired_columns"]
