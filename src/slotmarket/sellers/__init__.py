"""Seller directory collaborator."""

from .seller_directory import (
    SellerDirectory,
    SellerNotFoundError,
    SqlAlchemySellerDirectory,
    normalize_contact,
)

__all__ = [
    "SellerDirectory",
    "SellerNotFoundError",
    "SqlAlchemySellerDirectory",
    "normalize_contact",
]
