"""Count queries over the slot table."""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..db.db_models import SlotModel
from ..exceptions import handle_sqlalchemy_errors
from ..slots.slots_models import SlotStatus


class StatsRepository:
    """Collect slot counters grouped by operational status."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def count_by_status(self) -> dict[SlotStatus, int]:
        with handle_sqlalchemy_errors(entity="stats"):
            with self._session_factory() as session:
                rows = (
                    session.query(SlotModel.slot_status, func.count(SlotModel.id))
                    .group_by(SlotModel.slot_status)
                    .all()
                )
        counts = {status: 0 for status in SlotStatus}
        for status, count in rows:
            counts[SlotStatus(status)] = count or 0
        return counts


__all__ = ["StatsRepository"]
