"""Dependency wiring helpers."""

from __future__ import annotations

from datetime import timedelta

from fastapi import FastAPI

from .audit.audit_api import router as audit_router
from .audit.audit_service import SqlAlchemyAuditLog
from .config import AppConfig
from .media.image_store import LocalImageStore
from .sellers.seller_directory import SqlAlchemySellerDirectory
from .slots.slots_api import router as slots_router
from .slots.slots_repository import SlotRepository
from .slots.slots_service import SlotTransitionService
from .stats.stats_api import router as stats_router
from .stats.stats_repository import StatsRepository
from .stats.stats_service import StatsAggregator


def build_slot_service(config: AppConfig) -> SlotTransitionService:
    """Assemble the transition service with the default adapters."""
    settings = config.settings
    image_store = LocalImageStore(config.media_paths)
    image_store.ensure_namespaces()
    stats = StatsAggregator(
        StatsRepository(config.session_factory),
        ttl=timedelta(seconds=settings.stats_cache_ttl_seconds),
    )
    return SlotTransitionService(
        SlotRepository(config.session_factory),
        seller_directory=SqlAlchemySellerDirectory(config.session_factory),
        image_cleanup=image_store,
        audit_log=SqlAlchemyAuditLog(config.session_factory),
        stats=stats,
        default_duration_days=settings.default_duration_days,
        max_page_size=settings.max_page_size,
    )


def include_routers(app: FastAPI, config: AppConfig) -> None:
    """Mount module routers and attach services."""
    app.state.config = config
    app.state.slot_service = build_slot_service(config)
    app.state.audit_log = SqlAlchemyAuditLog(config.session_factory)

    app.include_router(slots_router)
    app.include_router(stats_router)
    app.include_router(audit_router)


__all__ = ["build_slot_service", "include_routers"]
