"""Slot counters backed by a repository and TTL cache."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Protocol

from .. import SLOT_COUNT
from ..db.db_models import utcnow
from ..slots.slots_models import SlotStatus

STATS_CACHE_TTL = timedelta(seconds=30)


class SlotCounter(Protocol):
    def count_by_status(self) -> dict[SlotStatus, int]:
        ...


@dataclass(frozen=True, slots=True)
class SlotStats:
    total: int
    live: int
    maintenance: int
    available: int

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "live": self.live,
            "maintenance": self.maintenance,
            "available": self.available,
        }


@dataclass(slots=True)
class _CacheEntry:
    value: SlotStats
    expires_at: datetime

    def is_valid(self, *, now: datetime) -> bool:
        return now < self.expires_at


class StatsAggregator:
    """Advisory live/maintenance/available counters.

    Results may lag behind in-flight transitions by up to ``ttl``;
    :meth:`invalidate` is called by the transition service after every
    committed mutation.
    """

    def __init__(
        self,
        repository: SlotCounter,
        *,
        ttl: timedelta = STATS_CACHE_TTL,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if ttl < timedelta(0):
            raise ValueError("ttl must be non-negative")
        self._repository = repository
        self._ttl = ttl
        self._clock = clock or utcnow
        self._entry: _CacheEntry | None = None
        self._generation = 0
        self._lock = threading.Lock()

    def get_stats(self) -> SlotStats:
        now = self._clock()
        with self._lock:
            entry = self._entry
            generation = self._generation
        if entry is not None and entry.is_valid(now=now):
            return entry.value

        counts = self._repository.count_by_status()
        live = counts.get(SlotStatus.LIVE, 0)
        maintenance = counts.get(SlotStatus.MAINTENANCE, 0)
        stats = SlotStats(
            total=SLOT_COUNT,
            live=live,
            maintenance=maintenance,
            available=SLOT_COUNT - live - maintenance,
        )
        if self._ttl > timedelta(0):
            with self._lock:
                # An invalidation during the query makes these counts stale.
                if self._generation == generation:
                    self._entry = _CacheEntry(value=stats, expires_at=now + self._ttl)
        return stats

    def invalidate(self) -> None:
        with self._lock:
            self._entry = None
            self._generation += 1


__all__ = ["STATS_CACHE_TTL", "SlotStats", "StatsAggregator"]
