"""Resolution of seller contact tokens to seller identities."""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db.db_models import SellerModel
from ..exceptions import InvalidInputError, UpstreamResolutionError, handle_sqlalchemy_errors

_NON_DIGITS = re.compile(r"\D+")


class SellerNotFoundError(UpstreamResolutionError):
    """Raised when no active seller owns the given contact token."""


class SellerDirectory(Protocol):
    def resolve(self, contact: str) -> str:
        """Return the seller id for ``contact`` or raise :class:`SellerNotFoundError`."""


def normalize_contact(contact: str) -> str:
    """Reduce a phone-style contact to ``+<digits>``.

    ``"+237 600-000-000"`` and ``"237600000000"`` both become
    ``"+237600000000"``.
    """
    digits = _NON_DIGITS.sub("", contact or "")
    if len(digits) < 6:
        raise InvalidInputError("seller contact must contain at least 6 digits")
    return f"+{digits}"


class SqlAlchemySellerDirectory:
    """Look sellers up in the ``seller`` table by normalized contact."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def resolve(self, contact: str) -> str:
        normalized = normalize_contact(contact)
        with handle_sqlalchemy_errors(entity="seller"):
            with self._session_factory() as session:
                row = (
                    session.query(SellerModel)
                    .filter(SellerModel.contact == normalized)
                    .one_or_none()
                )
        if row is None or not row.is_active:
            raise SellerNotFoundError(f"no active seller for contact {normalized}")
        return row.id

    def register(self, *, display_name: str, contact: str) -> str:
        """Create a seller and return its id."""
        normalized = normalize_contact(contact)
        seller_id = uuid.uuid4().hex
        try:
            with self._session_factory() as session:
                session.add(
                    SellerModel(
                        id=seller_id,
                        display_name=display_name,
                        contact=normalized,
                        is_active=True,
                    )
                )
                session.commit()
        except IntegrityError as exc:
            raise InvalidInputError(
                f"contact {normalized} is already registered"
            ) from exc
        return seller_id


__all__ = [
    "SellerDirectory",
    "SellerNotFoundError",
    "SqlAlchemySellerDirectory",
    "normalize_contact",
]
