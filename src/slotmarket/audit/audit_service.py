"""Audit trail of administrative slot actions."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from sqlalchemy.orm import Session

from ..db.db_models import AuditLogModel
from ..exceptions import handle_sqlalchemy_errors


class AuditLog(Protocol):
    def record(
        self,
        action: str,
        slot_id: int,
        actor_id: str | None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Persist one audit entry."""


@dataclass(slots=True)
class AuditEntry:
    id: int
    actor_id: str | None
    action: str
    resource: str
    resource_id: str | None
    metadata: dict[str, Any]
    created_at: datetime


class SqlAlchemyAuditLog:
    """Write audit entries to ``admin_audit_log``."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def record(
        self,
        action: str,
        slot_id: int,
        actor_id: str | None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        row = AuditLogModel(
            actor_id=actor_id,
            action=action,
            resource="slot",
            resource_id=str(slot_id),
            metadata_json=json.dumps(dict(metadata), default=str) if metadata else None,
        )
        with handle_sqlalchemy_errors(entity="audit_log"):
            with self._session_factory() as session:
                session.add(row)
                session.commit()

    def list_recent(
        self, *, limit: int = 50, offset: int = 0, slot_id: int | None = None
    ) -> list[AuditEntry]:
        """Newest entries first, optionally for one slot."""
        with handle_sqlalchemy_errors(entity="audit_log"):
            with self._session_factory() as session:
                query = session.query(AuditLogModel)
                if slot_id is not None:
                    query = query.filter(AuditLogModel.resource_id == str(slot_id))
                rows = (
                    query.order_by(AuditLogModel.created_at.desc(), AuditLogModel.id.desc())
                    .offset(offset)
                    .limit(limit)
                    .all()
                )
                return [self._to_domain(row) for row in rows]

    @staticmethod
    def _to_domain(model: AuditLogModel) -> AuditEntry:
        return AuditEntry(
            id=model.id,
            actor_id=model.actor_id,
            action=model.action,
            resource=model.resource,
            resource_id=model.resource_id,
            metadata=json.loads(model.metadata_json) if model.metadata_json else {},
            created_at=model.created_at,
        )


__all__ = ["AuditEntry", "AuditLog", "SqlAlchemyAuditLog"]
