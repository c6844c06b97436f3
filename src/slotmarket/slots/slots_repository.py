"""Slot repository backed by SQLAlchemy.

This is the only component that touches the ``auction_slot`` table. Every
write goes through :meth:`SlotRepository.conditional_update`, a single
``UPDATE ... WHERE id = :id AND <expected columns>`` statement whose row count
tells the caller whether the compare-and-swap won.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Query, Session

from ..db.db_models import SlotModel, utcnow
from ..exceptions import ensure_found, handle_sqlalchemy_errors
from .slots_models import (
    LISTING_FIELDS,
    DeliveryOption,
    DraftStatus,
    ListingContent,
    Slot,
    SlotFilter,
    SlotPage,
    SlotStatus,
)

_SEARCH_COLUMNS = (
    SlotModel.live_name_en,
    SlotModel.live_name_fr,
    SlotModel.live_description_en,
    SlotModel.live_description_fr,
    SlotModel.draft_name_en,
    SlotModel.draft_name_fr,
    SlotModel.draft_description_en,
    SlotModel.draft_description_fr,
)


def content_columns(prefix: str, content: ListingContent) -> dict[str, Any]:
    """Map listing content onto the ``<prefix>_<field>`` columns."""
    values: dict[str, Any] = {}
    for name in LISTING_FIELDS:
        value = getattr(content, name)
        if name == "delivery_options" and value is not None:
            value = [option.to_json() for option in value]
        elif isinstance(value, list):
            value = list(value)
        values[f"{prefix}_{name}"] = value
    return values


def blank_columns(prefix: str) -> dict[str, Any]:
    return {f"{prefix}_{name}": None for name in LISTING_FIELDS}


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SlotRepository:
    """Provide access to the fixed slot pool stored in the database."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get_slot(self, slot_id: int) -> Slot:
        with handle_sqlalchemy_errors(entity="slot"):
            with self._session_factory() as session:
                row = session.get(SlotModel, slot_id)
                ensure_found(row, entity="Slot", identifier=slot_id)
                return self._to_domain(row)

    def list_slots(self, slot_filter: SlotFilter) -> SlotPage:
        page = max(1, slot_filter.page)
        page_size = max(1, slot_filter.page_size)
        with handle_sqlalchemy_errors(entity="slot"):
            with self._session_factory() as session:
                query = self._filtered(session.query(SlotModel), slot_filter)
                total = query.order_by(None).count()
                rows = (
                    query.order_by(SlotModel.id)
                    .offset((page - 1) * page_size)
                    .limit(page_size)
                    .all()
                )
                return SlotPage(
                    items=[self._to_domain(row) for row in rows],
                    total=total,
                    page=page,
                    page_size=page_size,
                )

    def list_expired_live(self, now: datetime) -> list[Slot]:
        """Live slots whose ``end_time`` is at or before ``now``."""
        with handle_sqlalchemy_errors(entity="slot"):
            with self._session_factory() as session:
                rows = (
                    session.query(SlotModel)
                    .filter(
                        SlotModel.slot_status == SlotStatus.LIVE.value,
                        SlotModel.end_time.isnot(None),
                        SlotModel.end_time <= now,
                    )
                    .order_by(SlotModel.id)
                    .all()
                )
                return [self._to_domain(row) for row in rows]

    def conditional_update(
        self,
        slot_id: int,
        *,
        expected: Mapping[str, object],
        values: Mapping[str, Any],
    ) -> bool:
        """Apply ``values`` only if every ``expected`` column still matches.

        An expected value that is a non-string collection matches any of its
        members. ``version`` is incremented and ``updated_at`` stamped in the
        same statement. Returns ``True`` when exactly one row was written.
        """
        conditions = [SlotModel.id == slot_id]
        for column_name, expected_value in expected.items():
            column = getattr(SlotModel, column_name)
            if isinstance(expected_value, Collection) and not isinstance(expected_value, str):
                conditions.append(column.in_([self._plain(item) for item in expected_value]))
            else:
                conditions.append(column == self._plain(expected_value))

        payload = {key: self._plain(value) for key, value in values.items()}
        payload["version"] = SlotModel.version + 1
        payload.setdefault("updated_at", utcnow())

        statement = (
            update(SlotModel)
            .where(*conditions)
            .values(**payload)
            .execution_options(synchronize_session=False)
        )
        with handle_sqlalchemy_errors(entity="slot"):
            with self._session_factory() as session:
                result = session.execute(statement)
                session.commit()
                return result.rowcount == 1

    def increment_view_count(self, slot_id: int) -> int | None:
        """Atomically bump ``view_count`` of a live slot.

        Returns the new count, or ``None`` when the slot is not live.
        """
        statement = (
            update(SlotModel)
            .where(
                SlotModel.id == slot_id,
                SlotModel.slot_status == SlotStatus.LIVE.value,
            )
            .values(view_count=SlotModel.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        with handle_sqlalchemy_errors(entity="slot"):
            with self._session_factory() as session:
                result = session.execute(statement)
                if result.rowcount != 1:
                    session.rollback()
                    return None
                # Read inside the same transaction so concurrent bumps are not counted.
                count = session.execute(
                    select(SlotModel.view_count).where(SlotModel.id == slot_id)
                ).scalar_one()
                session.commit()
                return count

    @staticmethod
    def _plain(value: Any) -> Any:
        if isinstance(value, (SlotStatus, DraftStatus)):
            return value.value
        return value

    @staticmethod
    def _filtered(query: Query, slot_filter: SlotFilter) -> Query:
        if slot_filter.slot_status is not None:
            query = query.filter(SlotModel.slot_status == slot_filter.slot_status.value)
        if slot_filter.draft_status is not None:
            query = query.filter(SlotModel.draft_status == slot_filter.draft_status.value)
        if slot_filter.featured is not None:
            query = query.filter(SlotModel.featured == slot_filter.featured)
        if slot_filter.seller_id:
            query = query.filter(SlotModel.live_seller_id == slot_filter.seller_id)
        term = (slot_filter.search or "").strip()
        if term:
            pattern = f"%{_escape_like(term.lower())}%"
            query = query.filter(
                or_(
                    *(
                        func.lower(column).like(pattern, escape="\\")
                        for column in _SEARCH_COLUMNS
                    )
                )
            )
        return query

    @staticmethod
    def _to_content(model: SlotModel, prefix: str) -> ListingContent:
        raw = {name: getattr(model, f"{prefix}_{name}") for name in LISTING_FIELDS}
        if raw["delivery_options"] is not None:
            raw["delivery_options"] = [
                DeliveryOption.from_json(option) for option in raw["delivery_options"]
            ]
        for name in ("categories", "tags", "image_urls"):
            if raw[name] is not None:
                raw[name] = list(raw[name])
        if raw["price"] is not None and not isinstance(raw["price"], Decimal):
            raw["price"] = Decimal(str(raw["price"]))
        return ListingContent(**raw)

    @staticmethod
    def _to_domain(model: SlotModel) -> Slot:
        return Slot(
            id=model.id,
            slot_status=SlotStatus(model.slot_status),
            draft_status=DraftStatus(model.draft_status),
            version=model.version,
            live_seller_id=model.live_seller_id,
            live=SlotRepository._to_content(model, "live"),
            start_time=model.start_time,
            end_time=model.end_time,
            featured=bool(model.featured),
            view_count=model.view_count or 0,
            draft_seller_contact=model.draft_seller_contact,
            draft=SlotRepository._to_content(model, "draft"),
            draft_updated_at=model.draft_updated_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


__all__ = ["SlotRepository", "blank_columns", "content_columns"]
