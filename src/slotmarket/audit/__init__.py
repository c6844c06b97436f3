"""Audit collaborator."""

from .audit_service import AuditEntry, AuditLog, SqlAlchemyAuditLog

__all__ = ["AuditEntry", "AuditLog", "SqlAlchemyAuditLog"]
