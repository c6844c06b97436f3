"""Entry point for every slot lifecycle operation.

Each mutation follows the same shape: load the slot, validate the requested
transition against both state machines, build the column values, check the
caller's deadline and issue a single conditional ``UPDATE``. Audit, image
cleanup and stats invalidation run only after that write committed and never
turn a committed success into a failure.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any, Protocol, TypeVar

import structlog

from ..audit.audit_service import AuditLog
from ..db.db_models import utcnow
from ..exceptions import AppError, InvalidInputError, PreconditionFailedError
from ..media.image_store import ImageCleanup
from ..sellers.seller_directory import SellerDirectory
from ..stats.stats_service import SlotStats
from .deadlines import Deadline
from .draft_workspace import DraftWorkspace
from .maintenance_gate import MaintenanceGate
from .publish_pipeline import PublishPipeline, retired_columns
from .slots_models import (
    DraftStatus,
    Slot,
    SlotFilter,
    SlotPage,
    SlotStatus,
    is_valid_slot_id,
)
from .slots_repository import SlotRepository
from .slots_results import ErrorKind, OperationResult, error_kind_for
from .transitions import SlotAction, plan_transition

T = TypeVar("T")

logger = structlog.get_logger(__name__)

DEFAULT_DURATION_DAYS = 7
DEFAULT_MAX_PAGE_SIZE = 100


class StatsCache(Protocol):
    def get_stats(self) -> SlotStats:
        ...

    def invalidate(self) -> None:
        ...


class SlotTransitionService:
    """Coordinate slot transitions, conditional writes and their follow-ups."""

    def __init__(
        self,
        repository: SlotRepository,
        *,
        seller_directory: SellerDirectory,
        image_cleanup: ImageCleanup,
        audit_log: AuditLog,
        stats: StatsCache,
        workspace: DraftWorkspace | None = None,
        pipeline: PublishPipeline | None = None,
        gate: MaintenanceGate | None = None,
        clock: Callable[[], datetime] | None = None,
        default_duration_days: int = DEFAULT_DURATION_DAYS,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
    ) -> None:
        self._repository = repository
        self._sellers = seller_directory
        self._images = image_cleanup
        self._audit = audit_log
        self._stats = stats
        self._workspace = workspace or DraftWorkspace()
        self._pipeline = pipeline or PublishPipeline(self._workspace)
        self._gate = gate or MaintenanceGate()
        self._clock = clock or utcnow
        self._default_duration_days = default_duration_days
        self._max_page_size = max_page_size
        self._logger = logger

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_slot(self, slot_id: int) -> OperationResult[Slot]:
        return self._execute("get_slot", slot_id, lambda: self._load(slot_id))

    def list_slots(self, slot_filter: SlotFilter | None = None) -> OperationResult[SlotPage]:
        requested = slot_filter or SlotFilter()

        def run() -> SlotPage:
            if requested.page < 1:
                raise InvalidInputError("page must be >= 1")
            if requested.page_size < 1:
                raise InvalidInputError("page_size must be >= 1")
            clamped = replace(
                requested, page_size=min(requested.page_size, self._max_page_size)
            )
            return self._repository.list_slots(clamped)

        return self._execute("list_slots", None, run)

    def get_stats(self) -> OperationResult[SlotStats]:
        return self._execute("get_stats", None, self._stats.get_stats)

    # ------------------------------------------------------------------
    # Draft axis
    # ------------------------------------------------------------------
    def save_draft(
        self,
        slot_id: int,
        fields: Mapping[str, Any],
        *,
        actor_id: str | None = None,
        deadline: Deadline | None = None,
    ) -> OperationResult[Slot]:
        def run() -> Slot:
            slot = self._load(slot_id)
            plan_transition(slot, SlotAction.SAVE_DRAFT)
            values = self._workspace.stage(fields, now=self._clock())
            # Partial field upsert: last writer wins per field.
            self._write(slot, SlotAction.SAVE_DRAFT, expected={}, values=values, deadline=deadline)
            self._after_commit(
                SlotAction.SAVE_DRAFT,
                slot_id,
                actor_id,
                metadata={"fields": sorted(fields)},
            )
            return self._reload(slot_id)

        return self._execute(SlotAction.SAVE_DRAFT, slot_id, run)

    def mark_ready(
        self,
        slot_id: int,
        *,
        actor_id: str | None = None,
        deadline: Deadline | None = None,
    ) -> OperationResult[Slot]:
        def run() -> Slot:
            slot = self._load(slot_id)
            plan_transition(slot, SlotAction.MARK_READY)
            self._workspace.ensure_publishable(slot)
            self._write(
                slot,
                SlotAction.MARK_READY,
                expected={"draft_status": DraftStatus.DRAFTING, "version": slot.version},
                values={"draft_status": DraftStatus.READY_TO_PUBLISH},
                deadline=deadline,
            )
            self._after_commit(SlotAction.MARK_READY, slot_id, actor_id)
            return self._reload(slot_id)

        return self._execute(SlotAction.MARK_READY, slot_id, run)

    def approve(
        self,
        slot_id: int,
        seller_contact: str,
        *,
        duration_days: int | None = None,
        actor_id: str | None = None,
        deadline: Deadline | None = None,
    ) -> OperationResult[Slot]:
        days = self._default_duration_days if duration_days is None else duration_days

        def run() -> Slot:
            slot = self._load(slot_id)
            plan_transition(slot, SlotAction.APPROVE)
            seller_id = self._sellers.resolve(seller_contact)
            values = self._pipeline.build(
                slot, seller_id=seller_id, now=self._clock(), duration_days=days
            )
            self._write(
                slot,
                SlotAction.APPROVE,
                expected=self._pipeline.expected(slot),
                values=values,
                deadline=deadline,
            )
            self._after_commit(
                SlotAction.APPROVE,
                slot_id,
                actor_id,
                metadata={
                    "seller_id": seller_id,
                    "duration_days": days,
                    "replaced_live": slot.slot_status is SlotStatus.LIVE,
                },
            )
            return self._reload(slot_id)

        return self._execute(SlotAction.APPROVE, slot_id, run)

    def reject(
        self,
        slot_id: int,
        *,
        reason: str | None = None,
        actor_id: str | None = None,
        deadline: Deadline | None = None,
    ) -> OperationResult[Slot]:
        def run() -> Slot:
            slot = self._load(slot_id)
            plan_transition(slot, SlotAction.REJECT)
            self._write(
                slot,
                SlotAction.REJECT,
                expected={
                    "draft_status": DraftStatus.READY_TO_PUBLISH,
                    "version": slot.version,
                },
                values=self._workspace.cleared(),
                deadline=deadline,
            )
            self._after_commit(
                SlotAction.REJECT, slot_id, actor_id, metadata={"reason": reason}
            )
            return self._reload(slot_id)

        return self._execute(SlotAction.REJECT, slot_id, run)

    # ------------------------------------------------------------------
    # Operational axis
    # ------------------------------------------------------------------
    def set_maintenance(
        self,
        slot_id: int,
        enabled: bool,
        *,
        actor_id: str | None = None,
        deadline: Deadline | None = None,
    ) -> OperationResult[Slot]:
        action = SlotAction.ENABLE_MAINTENANCE if enabled else SlotAction.DISABLE_MAINTENANCE

        def run() -> Slot:
            slot = self._load(slot_id)
            plan = self._gate.plan(slot, enabled=enabled)
            self._write(
                slot, plan.action, expected=plan.expected, values=plan.values, deadline=deadline
            )
            self._after_commit(
                plan.action,
                slot_id,
                actor_id,
                metadata={"previous_status": slot.slot_status.value},
                clear_images=plan.retires_listing,
            )
            return self._reload(slot_id)

        return self._execute(action, slot_id, run)

    def remove_product(
        self,
        slot_id: int,
        *,
        actor_id: str | None = None,
        deadline: Deadline | None = None,
    ) -> OperationResult[Slot]:
        def run() -> Slot:
            slot = self._load(slot_id)
            plan_transition(slot, SlotAction.REMOVE_PRODUCT)
            self._write(
                slot,
                SlotAction.REMOVE_PRODUCT,
                expected={"slot_status": slot.slot_status, "version": slot.version},
                values=retired_columns(SlotStatus.EMPTY),
                deadline=deadline,
            )
            self._after_commit(
                SlotAction.REMOVE_PRODUCT,
                slot_id,
                actor_id,
                metadata={"previous_status": slot.slot_status.value},
                clear_images=True,
            )
            return self._reload(slot_id)

        return self._execute(SlotAction.REMOVE_PRODUCT, slot_id, run)

    def set_featured(
        self,
        slot_id: int,
        featured: bool,
        *,
        actor_id: str | None = None,
        deadline: Deadline | None = None,
    ) -> OperationResult[Slot]:
        def run() -> Slot:
            slot = self._load(slot_id)
            plan_transition(slot, SlotAction.SET_FEATURED)
            self._write(
                slot,
                SlotAction.SET_FEATURED,
                expected={"slot_status": SlotStatus.LIVE, "version": slot.version},
                values={"featured": bool(featured)},
                deadline=deadline,
            )
            self._after_commit(
                SlotAction.SET_FEATURED,
                slot_id,
                actor_id,
                metadata={"featured": bool(featured)},
            )
            return self._reload(slot_id)

        return self._execute(SlotAction.SET_FEATURED, slot_id, run)

    def record_view(self, slot_id: int) -> OperationResult[int]:
        """Count one public view of a live listing. Not audited."""

        def run() -> int:
            slot = self._load(slot_id)
            if slot.slot_status is not SlotStatus.LIVE:
                raise PreconditionFailedError(f"slot is {slot.slot_status.value}, not live")
            count = self._repository.increment_view_count(slot_id)
            if count is None:
                raise PreconditionFailedError("slot is no longer live")
            return count

        return self._execute("record_view", slot_id, run)

    def expire_listings(
        self, *, now: datetime | None = None
    ) -> OperationResult[list[int]]:
        """Retire every live listing whose ``end_time`` has passed."""
        current = now or self._clock()

        def run() -> list[int]:
            expired: list[int] = []
            for slot in self._repository.list_expired_live(current):
                try:
                    plan_transition(slot, SlotAction.EXPIRE)
                    self._write(
                        slot,
                        SlotAction.EXPIRE,
                        expected={"slot_status": SlotStatus.LIVE, "version": slot.version},
                        values=retired_columns(SlotStatus.EMPTY),
                        deadline=None,
                    )
                except PreconditionFailedError:
                    # Changed concurrently; the next sweep sees the new state.
                    continue
                expired.append(slot.id)
                self._after_commit(
                    SlotAction.EXPIRE,
                    slot.id,
                    None,
                    metadata={
                        "end_time": slot.end_time.isoformat() if slot.end_time else None
                    },
                    clear_images=True,
                )
            self._logger.info(
                "slot.expiry.sweep", expired=expired, count=len(expired), now=current.isoformat()
            )
            return expired

        return self._execute(SlotAction.EXPIRE, None, run)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _execute(
        self, action: str, slot_id: int | None, operation: Callable[[], T]
    ) -> OperationResult[T]:
        try:
            value = operation()
        except AppError as exc:
            kind = error_kind_for(exc)
            self._logger.info(
                "slot.transition.rejected",
                action=str(action),
                slot_id=slot_id,
                failure_reason=kind.value,
                detail=str(exc),
            )
            return OperationResult.failure(kind, str(exc))
        except Exception as exc:
            self._logger.exception(
                "slot.transition.failed", action=str(action), slot_id=slot_id
            )
            return OperationResult.failure(ErrorKind.UNKNOWN, f"unexpected error: {exc}")
        return OperationResult.success(value)

    def _load(self, slot_id: int) -> Slot:
        if not is_valid_slot_id(slot_id):
            raise InvalidInputError(f"invalid slot id: {slot_id!r}")
        return self._repository.get_slot(slot_id)

    def _reload(self, slot_id: int) -> Slot | None:
        """Snapshot after a committed write; a failed read does not undo success."""
        try:
            return self._repository.get_slot(slot_id)
        except AppError:
            self._logger.warning("slot.followup.failed", step="reload", slot_id=slot_id)
            return None

    def _write(
        self,
        slot: Slot,
        action: SlotAction,
        *,
        expected: Mapping[str, object],
        values: Mapping[str, Any],
        deadline: Deadline | None,
    ) -> None:
        if deadline is not None:
            deadline.ensure_active(now=self._clock())
        if not self._repository.conditional_update(slot.id, expected=expected, values=values):
            raise PreconditionFailedError(
                f"slot {slot.id} changed concurrently, {action.value} not applied"
            )
        self._logger.info(
            "slot.transition.applied",
            action=action.value,
            slot_id=slot.id,
            slot_status=str(values.get("slot_status", slot.slot_status)),
            draft_status=str(values.get("draft_status", slot.draft_status)),
        )

    def _after_commit(
        self,
        action: SlotAction,
        slot_id: int,
        actor_id: str | None,
        *,
        metadata: Mapping[str, Any] | None = None,
        clear_images: bool = False,
    ) -> None:
        if clear_images:
            try:
                removed = self._images.clear_namespace(slot_id)
            except Exception as exc:
                self._logger.warning(
                    "slot.followup.failed",
                    step="image_cleanup",
                    action=action.value,
                    slot_id=slot_id,
                    error=str(exc),
                )
            else:
                self._logger.info(
                    "slot.images.cleared", action=action.value, slot_id=slot_id, removed=removed
                )
        try:
            self._audit.record(action.value, slot_id, actor_id, metadata)
        except Exception as exc:
            self._logger.warning(
                "slot.followup.failed",
                step="audit",
                action=action.value,
                slot_id=slot_id,
                error=str(exc),
            )
        try:
            self._stats.invalidate()
        except Exception as exc:
            self._logger.warning(
                "slot.followup.failed",
                step="stats_invalidate",
                action=action.value,
                slot_id=slot_id,
                error=str(exc),
            )


__all__ = ["DEFAULT_DURATION_DAYS", "SlotTransitionService"]
