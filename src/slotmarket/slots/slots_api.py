"""Admin slot routes (listing, draft workflow, moderation, maintenance)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from .slots_batch import batch_remove_products, batch_set_maintenance
from .slots_models import DraftStatus, SlotFilter, SlotStatus
from .slots_results import BatchResult, ErrorKind, OperationResult
from .slots_schemas import (
    ApproveRequest,
    BatchItemErrorPayload,
    BatchMaintenanceRequest,
    BatchRemoveRequest,
    BatchResponse,
    DraftSaveRequest,
    FeaturedRequest,
    MaintenanceRequest,
    RejectRequest,
    SlotPageResponse,
    SlotResponse,
    ViewCountResponse,
)
from .slots_service import SlotTransitionService

router = APIRouter(prefix="/api/slots", tags=["slots"])

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.PRECONDITION_FAILED: status.HTTP_409_CONFLICT,
    ErrorKind.UPSTREAM_RESOLUTION_FAILED: status.HTTP_424_FAILED_DEPENDENCY,
    ErrorKind.STORAGE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.CANCELLED: status.HTTP_408_REQUEST_TIMEOUT,
    ErrorKind.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_slot_service(request: Request) -> SlotTransitionService:
    try:
        return request.app.state.slot_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("SlotTransitionService is not configured") from exc


def get_actor_id(x_actor_id: str | None = Header(default=None)) -> str | None:
    value = (x_actor_id or "").strip()
    return value or None


def unwrap(result: OperationResult):
    """Return the result value or raise the mapped ``HTTPException``."""
    if result.error is None:
        return result.value
    raise HTTPException(
        status_code=ERROR_STATUS[result.error.kind],
        detail={
            "status": "error",
            "failure_reason": result.error.kind.value,
            "details": result.error.detail,
        },
    )


def _slot_response(result: OperationResult) -> SlotResponse:
    slot = unwrap(result)
    if slot is None:
        # Write committed but the snapshot read failed.
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "status": "error",
                "failure_reason": ErrorKind.STORAGE_FAILURE.value,
                "details": "operation applied, snapshot unavailable",
            },
        )
    return SlotResponse.from_domain(slot)


def _batch_response(batch: BatchResult) -> BatchResponse:
    return BatchResponse(
        overall_success=batch.overall_success,
        success_count=batch.success_count,
        failure_count=batch.failure_count,
        errors=[
            BatchItemErrorPayload(
                slot_id=item.slot_id,
                failure_reason=item.error.kind.value,
                details=item.error.detail,
            )
            for item in batch.errors
        ],
    )


@router.get("")
def list_slots(
    request: Request,
    slot_status: SlotStatus | None = Query(default=None, alias="status"),
    draft_status: DraftStatus | None = None,
    featured: bool | None = None,
    seller_id: str | None = None,
    search: str | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1),
    service: SlotTransitionService = Depends(get_slot_service),
) -> SlotPageResponse:
    default_size = request.app.state.config.settings.default_page_size
    slot_filter = SlotFilter(
        slot_status=slot_status,
        draft_status=draft_status,
        featured=featured,
        seller_id=seller_id,
        search=search,
        page=page,
        page_size=page_size or default_size,
    )
    return SlotPageResponse.from_domain(unwrap(service.list_slots(slot_filter)))


@router.post("/batch/maintenance")
def batch_maintenance(
    payload: BatchMaintenanceRequest,
    service: SlotTransitionService = Depends(get_slot_service),
    actor_id: str | None = Depends(get_actor_id),
) -> BatchResponse:
    batch = batch_set_maintenance(
        service, payload.slot_ids, payload.enabled, actor_id=actor_id
    )
    return _batch_response(batch)


@router.post("/batch/remove-product")
def batch_remove(
    payload: BatchRemoveRequest,
    service: SlotTransitionService = Depends(get_slot_service),
    actor_id: str | None = Depends(get_actor_id),
) -> BatchResponse:
    return _batch_response(batch_remove_products(service, payload.slot_ids, actor_id=actor_id))


@router.get("/{slot_id}")
def fetch_slot(
    slot_id: int,
    service: SlotTransitionService = Depends(get_slot_service),
) -> SlotResponse:
    return _slot_response(service.get_slot(slot_id))


@router.put("/{slot_id}/draft")
def save_draft(
    slot_id: int,
    payload: DraftSaveRequest,
    service: SlotTransitionService = Depends(get_slot_service),
    actor_id: str | None = Depends(get_actor_id),
) -> SlotResponse:
    fields = payload.model_dump(exclude_unset=True)
    return _slot_response(service.save_draft(slot_id, fields, actor_id=actor_id))


@router.post("/{slot_id}/draft/ready")
def mark_ready(
    slot_id: int,
    service: SlotTransitionService = Depends(get_slot_service),
    actor_id: str | None = Depends(get_actor_id),
) -> SlotResponse:
    return _slot_response(service.mark_ready(slot_id, actor_id=actor_id))


@router.post("/{slot_id}/approve")
def approve_slot(
    slot_id: int,
    payload: ApproveRequest,
    service: SlotTransitionService = Depends(get_slot_service),
    actor_id: str | None = Depends(get_actor_id),
) -> SlotResponse:
    result = service.approve(
        slot_id,
        payload.seller_contact,
        duration_days=payload.duration_days,
        actor_id=actor_id,
    )
    return _slot_response(result)


@router.post("/{slot_id}/reject")
def reject_slot(
    slot_id: int,
    payload: RejectRequest | None = None,
    service: SlotTransitionService = Depends(get_slot_service),
    actor_id: str | None = Depends(get_actor_id),
) -> SlotResponse:
    reason = payload.reason if payload is not None else None
    return _slot_response(service.reject(slot_id, reason=reason, actor_id=actor_id))


@router.put("/{slot_id}/maintenance")
def set_maintenance(
    slot_id: int,
    payload: MaintenanceRequest,
    service: SlotTransitionService = Depends(get_slot_service),
    actor_id: str | None = Depends(get_actor_id),
) -> SlotResponse:
    return _slot_response(
        service.set_maintenance(slot_id, payload.enabled, actor_id=actor_id)
    )


@router.delete("/{slot_id}/product")
def remove_product(
    slot_id: int,
    service: SlotTransitionService = Depends(get_slot_service),
    actor_id: str | None = Depends(get_actor_id),
) -> SlotResponse:
    return _slot_response(service.remove_product(slot_id, actor_id=actor_id))


@router.put("/{slot_id}/featured")
def set_featured(
    slot_id: int,
    payload: FeaturedRequest,
    service: SlotTransitionService = Depends(get_slot_service),
    actor_id: str | None = Depends(get_actor_id),
) -> SlotResponse:
    return _slot_response(
        service.set_featured(slot_id, payload.featured, actor_id=actor_id)
    )


@router.post("/{slot_id}/views")
def record_view(
    slot_id: int,
    service: SlotTransitionService = Depends(get_slot_service),
) -> ViewCountResponse:
    return ViewCountResponse(slot_id=slot_id, view_count=unwrap(service.record_view(slot_id)))
