"""Read-only routes over the admin audit trail."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..exceptions import AppError
from ..slots.slots_api import ERROR_STATUS
from ..slots.slots_results import error_kind_for
from .audit_schemas import AuditEntryResponse
from .audit_service import SqlAlchemyAuditLog

router = APIRouter(prefix="/api/audit", tags=["audit"])


def get_audit_log(request: Request) -> SqlAlchemyAuditLog:
    try:
        return request.app.state.audit_log  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("Audit log is not configured") from exc


@router.get("", response_model=list[AuditEntryResponse])
def list_audit_entries(
    slot_id: int | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    audit_log: SqlAlchemyAuditLog = Depends(get_audit_log),
) -> list[AuditEntryResponse]:
    """Newest administrative actions first."""
    try:
        entries = audit_log.list_recent(limit=limit, offset=offset, slot_id=slot_id)
    except AppError as exc:
        kind = error_kind_for(exc)
        raise HTTPException(
            status_code=ERROR_STATUS[kind],
            detail={"status": "error", "failure_reason": kind.value, "details": str(exc)},
        ) from exc
    return [AuditEntryResponse.from_domain(entry) for entry in entries]
