"""Database models and bootstrap helpers."""

from .db_init import init_db
from .db_models import AuditLogModel, Base, SellerModel, SlotModel, utcnow

__all__ = [
    "AuditLogModel",
    "Base",
    "SellerModel",
    "SlotModel",
    "init_db",
    "utcnow",
]
