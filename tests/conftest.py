from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable

import pytest
from sqlalchemy.orm import Session, sessionmaker

from slotmarket.config import MediaPaths, build_engine
from slotmarket.db.db_init import init_db
from slotmarket.media.image_store import ImageCleanupError
from slotmarket.sellers.seller_directory import SellerNotFoundError, normalize_contact
from slotmarket.slots.slots_models import DraftStatus, Slot, SlotStatus
from slotmarket.slots.slots_repository import SlotRepository
from slotmarket.slots.slots_service import SlotTransitionService
from slotmarket.stats.stats_repository import StatsRepository
from slotmarket.stats.stats_service import StatsAggregator

SELLER_CONTACT = "+237600000000"
OTHER_SELLER_CONTACT = "+237611111111"
CHAIR = {"name_en": "Chair", "price": 5000, "currency": "XAF"}


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class StubSellerDirectory:
    def __init__(self, sellers: dict[str, str] | None = None) -> None:
        self.sellers = {normalize_contact(k): v for k, v in (sellers or {}).items()}
        self.calls: list[str] = []

    def resolve(self, contact: str) -> str:
        self.calls.append(contact)
        normalized = normalize_contact(contact)
        try:
            return self.sellers[normalized]
        except KeyError:
            raise SellerNotFoundError(f"no active seller for contact {normalized}") from None


class RecordingImageCleanup:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.cleared: list[int] = []

    def clear_namespace(self, slot_id: int) -> int:
        self.cleared.append(slot_id)
        if self.fail:
            raise ImageCleanupError("storage bucket unavailable")
        return 2


class RecordingAuditLog:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.entries: list[tuple[str, int, str | None, dict[str, Any]]] = []

    def record(self, action, slot_id, actor_id, metadata=None) -> None:
        if self.fail:
            raise RuntimeError("audit sink down")
        self.entries.append((action, slot_id, actor_id, dict(metadata or {})))

    def actions(self, slot_id: int | None = None) -> list[str]:
        return [
            action
            for action, entry_slot, _, _ in self.entries
            if slot_id is None or entry_slot == slot_id
        ]


def check_invariants(slot: Slot) -> None:
    """Assert the record-level guarantees every committed slot must satisfy."""
    if slot.slot_status is SlotStatus.LIVE:
        assert slot.live_content_complete(), f"slot {slot.id} live with incomplete content"
    else:
        assert slot.live_content_cleared(), f"slot {slot.id} keeps live content"
        assert slot.featured is False
    if slot.draft_status is DraftStatus.EMPTY:
        assert slot.draft_cleared(), f"slot {slot.id} keeps draft content"
    else:
        assert slot.draft_updated_at is not None
    if slot.draft_status is DraftStatus.READY_TO_PUBLISH:
        assert slot.draft.has_name()
        assert slot.draft.price is not None and slot.draft.price > Decimal("0")
        assert slot.draft.currency is not None


@pytest.fixture
def invariants() -> Callable[[Slot], None]:
    return check_invariants


@pytest.fixture
def session_factory(tmp_path: Path) -> sessionmaker[Session]:
    # File-backed so worker threads share one database.
    engine = build_engine(f"sqlite:///{tmp_path / 'slots.db'}")
    factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)
    init_db(engine, factory)
    yield factory
    engine.dispose()


@pytest.fixture
def media_paths(tmp_path: Path) -> MediaPaths:
    root = tmp_path / "media"
    paths = MediaPaths(root=root, product_images=root / "product-images")
    paths.product_images.mkdir(parents=True)
    return paths


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 1, 12, 0, 0))


@pytest.fixture
def repository(session_factory) -> SlotRepository:
    return SlotRepository(session_factory)


@pytest.fixture
def sellers() -> StubSellerDirectory:
    return StubSellerDirectory(
        {SELLER_CONTACT: "seller-1", OTHER_SELLER_CONTACT: "seller-2"}
    )


@pytest.fixture
def images() -> RecordingImageCleanup:
    return RecordingImageCleanup()


@pytest.fixture
def audit() -> RecordingAuditLog:
    return RecordingAuditLog()


@pytest.fixture
def stats(session_factory, clock) -> StatsAggregator:
    return StatsAggregator(
        StatsRepository(session_factory), ttl=timedelta(seconds=30), clock=clock
    )


@pytest.fixture
def service(repository, sellers, images, audit, stats, clock) -> SlotTransitionService:
    return SlotTransitionService(
        repository,
        seller_directory=sellers,
        image_cleanup=images,
        audit_log=audit,
        stats=stats,
        clock=clock,
    )


@pytest.fixture
def make_ready(service) -> Callable[..., Slot]:
    """Bring a slot to ``ready_to_publish`` with the given draft fields."""

    def _make_ready(slot_id: int, **fields: Any) -> Slot:
        saved = service.save_draft(slot_id, fields or dict(CHAIR))
        assert saved.ok, saved.error
        ready = service.mark_ready(slot_id)
        assert ready.ok, ready.error
        return ready.value

    return _make_ready


@pytest.fixture
def make_live(service, make_ready) -> Callable[..., Slot]:
    """Publish a listing on ``slot_id`` through the regular draft flow."""

    def _make_live(slot_id: int, contact: str = SELLER_CONTACT, **fields: Any) -> Slot:
        make_ready(slot_id, **fields)
        approved = service.approve(slot_id, contact)
        assert approved.ok, approved.error
        return approved.value

    return _make_live
