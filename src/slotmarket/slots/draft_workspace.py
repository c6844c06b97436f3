"""Staging and validation of draft listing content."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from ..exceptions import InvalidInputError
from .slots_models import Currency, DeliveryOption, DraftStatus, Slot
from .slots_repository import blank_columns

_TEXT_FIELDS = frozenset({"name_en", "name_fr", "description_en", "description_fr"})
_STRING_LIST_FIELDS = frozenset({"categories", "tags", "image_urls"})
# Matches the Numeric(12, 2) price columns.
PRICE_SCALE = 2
MAX_PRICE = Decimal(10) ** (12 - PRICE_SCALE)
DRAFT_INPUT_FIELDS = frozenset(
    _TEXT_FIELDS
    | _STRING_LIST_FIELDS
    | {"seller_contact", "price", "currency", "delivery_options"}
)


class DraftWorkspace:
    """Validate partial draft input and the completeness of a draft.

    Partial drafts are always saveable; only :meth:`ensure_publishable`
    demands a name, a positive price and a currency.
    """

    def stage(self, fields: Mapping[str, Any], *, now: datetime) -> dict[str, Any]:
        """Return draft column values for ``fields`` (a partial update)."""
        if not fields:
            raise InvalidInputError("no draft fields supplied")
        unknown = sorted(set(fields) - DRAFT_INPUT_FIELDS)
        if unknown:
            raise InvalidInputError(f"unknown draft fields: {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for name, raw in fields.items():
            if name == "seller_contact":
                values["draft_seller_contact"] = self._text(name, raw)
            elif name in _TEXT_FIELDS:
                values[f"draft_{name}"] = self._text(name, raw)
            elif name == "price":
                values["draft_price"] = self._price(raw)
            elif name == "currency":
                values["draft_currency"] = self._currency(raw)
            elif name == "delivery_options":
                values["draft_delivery_options"] = self._delivery_options(raw)
            else:
                values[f"draft_{name}"] = self._string_list(name, raw)
        values["draft_status"] = DraftStatus.DRAFTING
        values["draft_updated_at"] = now
        return values

    def ensure_publishable(self, slot: Slot) -> None:
        missing: list[str] = []
        draft = slot.draft
        if not draft.has_name():
            missing.append("name")
        if draft.price is None or draft.price <= 0:
            missing.append("price")
        if draft.currency is None:
            missing.append("currency")
        if missing:
            raise InvalidInputError(f"draft is incomplete: missing {', '.join(missing)}")

    @staticmethod
    def cleared() -> dict[str, Any]:
        values = blank_columns("draft")
        values["draft_seller_contact"] = None
        values["draft_updated_at"] = None
        values["draft_status"] = DraftStatus.EMPTY
        return values

    @staticmethod
    def _text(name: str, raw: Any) -> str | None:
        if raw is None:
            return None
        if not isinstance(raw, str):
            raise InvalidInputError(f"{name} must be a string")
        value = raw.strip()
        return value or None

    @staticmethod
    def _price(raw: Any) -> Decimal | None:
        if raw is None:
            return None
        if isinstance(raw, bool):
            raise InvalidInputError("price must be a number")
        try:
            price = Decimal(str(raw))
        except InvalidOperation as exc:
            raise InvalidInputError("price must be a number") from exc
        if not price.is_finite() or price < 0:
            raise InvalidInputError("price must be a non-negative number")
        if price.normalize().as_tuple().exponent < -PRICE_SCALE:
            raise InvalidInputError(f"price must have at most {PRICE_SCALE} decimal places")
        if price >= MAX_PRICE:
            raise InvalidInputError(f"price must be below {MAX_PRICE}")
        return price

    @staticmethod
    def _currency(raw: Any) -> str | None:
        if raw is None:
            return None
        try:
            return Currency(str(raw).upper()).value
        except ValueError as exc:
            allowed = ", ".join(currency.value for currency in Currency)
            raise InvalidInputError(f"currency must be one of {allowed}") from exc

    @staticmethod
    def _string_list(name: str, raw: Any) -> list[str] | None:
        if raw is None:
            return None
        if isinstance(raw, str) or not isinstance(raw, (list, tuple, set, frozenset)):
            raise InvalidInputError(f"{name} must be a list of strings")
        items: list[str] = []
        for item in raw:
            if not isinstance(item, str):
                raise InvalidInputError(f"{name} must be a list of strings")
            value = item.strip()
            if value and value not in items:
                items.append(value)
        if name != "image_urls" and isinstance(raw, (set, frozenset)):
            items.sort()
        return items

    @staticmethod
    def _delivery_options(raw: Any) -> list[dict[str, Any]] | None:
        if raw is None:
            return None
        if not isinstance(raw, (list, tuple)):
            raise InvalidInputError("delivery_options must be a list")
        options: list[dict[str, Any]] = []
        for index, item in enumerate(raw):
            if isinstance(item, DeliveryOption):
                option = item
            elif isinstance(item, Mapping):
                if not item.get("name"):
                    raise InvalidInputError(f"delivery_options[{index}] needs a name")
                try:
                    option = DeliveryOption.from_json(dict(item))
                except (InvalidOperation, TypeError, ValueError) as exc:
                    raise InvalidInputError(
                        f"delivery_options[{index}] is malformed"
                    ) from exc
            else:
                raise InvalidInputError(f"delivery_options[{index}] must be an object")
            options.append(option.to_json())
        return options


__all__ = ["DRAFT_INPUT_FIELDS", "DraftWorkspace"]
