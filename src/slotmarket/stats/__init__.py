"""Slot statistics."""

from .stats_repository import StatsRepository
from .stats_service import SlotStats, StatsAggregator

__all__ = ["SlotStats", "StatsAggregator", "StatsRepository"]
