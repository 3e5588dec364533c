# ayana/auth/context.py
"""Authenticated customer context handed to every cart/order handler."""
from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from flask_login import current_user

from ayana.errors import MissingIdentity


@dataclass(frozen=True)
class CustomerContext:
    customer_id: int
    customer: object


def customer_context() -> CustomerContext:
    if not getattr(current_user, "is_authenticated", False):
        raise MissingIdentity()
    customer_id = getattr(current_user, "id", None)
    if customer_id is None:
        raise MissingIdentity()
    return CustomerContext(customer_id=customer_id, customer=current_user._get_current_object())


def with_customer(view):
    """Resolve the customer before the view runs and pass it as first argument."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        return view(customer_context(), *args, **kwargs)

    return wrapper
