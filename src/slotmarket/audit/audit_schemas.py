"""Pydantic schemas for the audit trail API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .audit_service import AuditEntry


class AuditEntryResponse(BaseModel):
    id: int
    actor_id: str | None = None
    action: str
    resource: str
    resource_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    @classmethod
    def from_domain(cls, entry: AuditEntry) -> "AuditEntryResponse":
        return cls(
            id=entry.id,
            actor_id=entry.actor_id,
            action=entry.action,
            resource=entry.resource,
            resource_id=entry.resource_id,
            metadata=entry.metadata,
            created_at=entry.created_at,
        )
