"""Caller-supplied deadlines and cancellation for slot operations."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..db.db_models import utcnow
from ..exceptions import OperationCancelledError


@dataclass(frozen=True, slots=True)
class Deadline:
    """Absolute expiry plus an optional cancellation flag.

    Checked immediately before the conditional write. A write that has been
    issued always runs to completion.
    """

    expires_at: datetime | None = None
    cancel_event: threading.Event | None = None

    @classmethod
    def after(cls, seconds: float, *, now: datetime | None = None) -> "Deadline":
        if seconds <= 0:
            raise ValueError("seconds must be positive")
        return cls(expires_at=(now or utcnow()) + timedelta(seconds=seconds))

    def is_cancelled(self, *, now: datetime | None = None) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            return True
        if self.expires_at is None:
            return False
        return (now or utcnow()) >= self.expires_at

    def ensure_active(self, *, now: datetime | None = None) -> None:
        if self.is_cancelled(now=now):
            raise OperationCancelledError("deadline exceeded before the write was issued")


__all__ = ["Deadline"]
