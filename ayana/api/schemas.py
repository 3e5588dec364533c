# ayana/api/schemas.py
"""Request payloads parsed into small dataclasses before reaching a service."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime

from ayana.errors import InvalidInput
from ayana.models import PaymentType


def _text(data, key, max_len=None) -> str:
    val = str(data.get(key) or "").strip()
    if max_len and len(val) > max_len:
        raise InvalidInput(f"Field '{key}' is longer than {max_len} characters.")
    return val


def _parse_date(raw) -> datetime | None:
    raw = str(raw or "").strip()
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        raise InvalidInput(f"Invalid deliveryDate '{raw}', expected ISO format.")


def _require_object(data) -> Mapping:
    if not isinstance(data, Mapping):
        raise InvalidInput("Expected a JSON object.")
    return data


@dataclass(frozen=True)
class DiscountRequest:
    code: str

    @classmethod
    def from_payload(cls, data: dict) -> "DiscountRequest":
        data = _require_object(data)
        return cls(code=_text(data, "code", max_len=100))


@dataclass(frozen=True)
class CheckoutRequest:
    delivery_address: str
    payment_type: PaymentType
    bank_account: str | None
    delivery_date: datetime | None
    personal_message: str | None
    discount_code: str | None

    @classmethod
    def from_payload(cls, data: dict) -> "CheckoutRequest":
        data = _require_object(data)
        address = _text(data, "deliveryAddress")
        if not address:
            raise InvalidInput("Missing required field 'deliveryAddress'.")

        raw_type = _text(data, "paymentType") or PaymentType.CARD.value
        try:
            payment_type = PaymentType(raw_type)
        except ValueError:
            allowed = ", ".join(t.value for t in PaymentType)
            raise InvalidInput(f"Unknown paymentType '{raw_type}' (allowed: {allowed}).")

        bank_account = _text(data, "bankAccount", max_len=34).replace(" ", "").upper() or None
        if payment_type is PaymentType.BANK_TRANSFER and not bank_account:
            raise InvalidInput("Bank transfer needs 'bankAccount'.")

        return cls(
            delivery_address=address,
            payment_type=payment_type,
            bank_account=bank_account,
            delivery_date=_parse_date(data.get("deliveryDate")),
            personal_message=_text(data, "personalMessage", max_len=1000) or None,
            discount_code=_text(data, "discountCode", max_len=100) or None,
        )
