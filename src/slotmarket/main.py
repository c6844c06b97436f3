"""FastAPI application entry point."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator

from fastapi import FastAPI

from .config import AppConfig, load_config
from .dependencies import include_routers
from .lifecycle import run_periodic_expiry_sweep
from .logging import configure_logging


def create_app(config: AppConfig | None = None, *, run_expiry_sweep: bool = True) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    configure_logging()
    cfg = config or load_config()

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not run_expiry_sweep:
            yield
            return
        shutdown_event = asyncio.Event()
        task = asyncio.create_task(
            run_periodic_expiry_sweep(
                service=app.state.slot_service,
                shutdown_event=shutdown_event,
                interval_seconds=cfg.settings.expiry_sweep_interval_seconds,
            ),
            name="slotmarket-expiry-sweep",
        )
        try:
            yield
        finally:
            shutdown_event.set()
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    app = FastAPI(title="SlotMarket", lifespan=lifespan)
    include_routers(app, cfg)
    return app
