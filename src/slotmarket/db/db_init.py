"""Database initialization helpers."""

from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .. import SLOT_COUNT
from .db_models import Base, SlotModel, utcnow


def init_db(engine: Engine, session_factory: sessionmaker[Session]) -> None:
    """Create tables and seed the fixed slot pool if the table is empty."""
    Base.metadata.create_all(engine)

    with session_factory() as session:
        _seed_slots(session)
        session.commit()


def _seed_slots(session: Session) -> None:
    existing = {slot_id for (slot_id,) in session.query(SlotModel.id).all()}
    if len(existing) == SLOT_COUNT:
        return
    now = utcnow()
    for slot_id in range(1, SLOT_COUNT + 1):
        if slot_id in existing:
            continue
        session.add(
            SlotModel(
                id=slot_id,
                version=1,
                slot_status="empty",
                draft_status="empty",
                featured=False,
                view_count=0,
                created_at=now,
                updated_at=now,
            )
        )
