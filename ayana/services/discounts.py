# ayana/services/discounts.py
"""Discount codes: verification and price calculation.

One optional code per order. A code that fails verification or has expired
never fails a checkout, it only means the customer pays full price.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from ayana.errors import InvalidDiscount
from ayana.models import Discount, DiscountType

logger = logging.getLogger(__name__)

WRONG_CODE_MESSAGE = "Wrong code, try again..."
EXPIRED_CODE_MESSAGE = "Code is expired..."

_CODE_RE = re.compile(r"^[A-Za-z0-9_-]{1,50}$")
_CENT = Decimal("0.01")
_ZERO = Decimal("0.00")


def to_decimal(val) -> Decimal:
    try:
        d = Decimal(str(val))
    except (InvalidOperation, ValueError):
        return _ZERO
    # NaN / Infinity never make a price
    return d if d.is_finite() else _ZERO


def _money(val) -> Decimal:
    return to_decimal(val).quantize(_CENT, rounding=ROUND_HALF_UP)


def _clean_code(code) -> str:
    return str(code or "").strip()


@dataclass
class DiscountOutcome:
    discount: Discount | None
    status: str

    @property
    def applied(self) -> bool:
        return self.discount is not None


@dataclass(frozen=True)
class DiscountTotals:
    total_with_discount: Decimal
    discount_id: int | None
    discount_amount: Decimal


class DiscountCodeVerifier:
    def __init__(self, discounts, clock=None):
        self.discounts = discounts
        self.clock = clock or datetime.utcnow

    def _lookup(self, code) -> Discount | None:
        code = _clean_code(code)
        if not _CODE_RE.match(code):
            return None
        return self.discounts.first_by(code=code)

    def verify_code(self, code) -> bool:
        return self._lookup(code) is not None

    def verify_not_expired(self, code) -> bool:
        discount = self._lookup(code)
        if discount is None:
            return False
        now = self.clock()
        if discount.begins_at is not None and now < discount.begins_at:
            return False
        if discount.ends_at is not None and now > discount.ends_at:
            return False
        return True

    def get_discount(self, code) -> Discount:
        discount = self._lookup(code)
        if discount is None:
            raise InvalidDiscount(f"Unknown discount code '{_clean_code(code)}'.")
        return discount

    def apply_code(self, code) -> DiscountOutcome:
        """Resolve a customer-entered code into a discount or a status message."""
        if not self.verify_code(code):
            logger.info("Discount code rejected: %r", _clean_code(code))
            return DiscountOutcome(None, WRONG_CODE_MESSAGE)
        if not self.verify_not_expired(code):
            logger.info("Discount code expired: %r", _clean_code(code))
            return DiscountOutcome(None, EXPIRED_CODE_MESSAGE)
        return DiscountOutcome(self.get_discount(code), _clean_code(code))


def apply_discount_value(amount, discount_amount, discount_type) -> Decimal:
    """Price after one discount, floored at zero and rounded to cents."""
    amount = to_decimal(amount)
    value = to_decimal(discount_amount)
    kind = DiscountType(discount_type) if not isinstance(discount_type, DiscountType) else discount_type

    if kind is DiscountType.PERCENTAGE:
        total = amount * (Decimal("1") - value / Decimal("100"))
    else:
        total = amount - value
    return max(_money(total), _ZERO)


def calculate_discount(payment, discount, verifier: DiscountCodeVerifier) -> DiscountTotals:
    """
    Final payable total for ``payment``.

    ``discount`` only has to carry the code the customer typed in; amount,
    type and id always come from the stored discount the verifier resolves.
    """
    full = _money(payment.payed_amount or 0)
    code = _clean_code(getattr(discount, "code", None))

    if not code or not verifier.verify_code(code) or not verifier.verify_not_expired(code):
        return DiscountTotals(full, None, _ZERO)

    stored = verifier.get_discount(code)
    total = apply_discount_value(full, stored.amount, stored.discount_type)
    return DiscountTotals(total, stored.id, to_decimal(stored.amount))


def preview_total(subtotal, discount_amount, discount_type) -> Decimal:
    """Cart page total from the discount parameters carried in the redirect."""
    if to_decimal(discount_amount) <= 0:
        return _money(subtotal)
    try:
        return apply_discount_value(subtotal, discount_amount, discount_type)
    except ValueError:
        return _money(subtotal)
