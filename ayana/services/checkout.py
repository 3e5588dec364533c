# ayana/services/checkout.py
"""Checkout: cart -> payment + order, in a single transaction.

place_order() runs the steps in order

    cart review -> discount -> payment saved -> order saved -> cart cleared

and commits once at the end. Any failure rolls back everything staged so
far, so a completed order never sits next to a non-empty cart.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from ayana.errors import CheckoutError, InvalidInput, PersistenceFailure
from ayana.models import Discount, Order, OrderItem, Payment
from ayana.services.cart import cart_subtotal, get_cart_items, require_customer_id
from ayana.services.discounts import DiscountCodeVerifier, DiscountTotals, calculate_discount

logger = logging.getLogger(__name__)


@dataclass
class CheckoutResult:
    order: Order
    payment: Payment
    totals: DiscountTotals
    items: list


def save_payment_data(store, payment: Payment, total_with_discount, discount_id) -> Payment:
    payment.payed_amount = total_with_discount
    payment.discount_id = discount_id
    store.payments.add(payment)
    store.flush()
    return payment


def save_order_data(store, order: Order, customer_id, payment: Payment, total_with_discount) -> Order:
    require_customer_id(customer_id)
    if payment is None or payment.id is None:
        raise InvalidInput("Payment must be saved before the order.")

    order.customer_id = customer_id
    order.payment_id = payment.id
    order.total_amount_to_pay = total_with_discount
    order.is_order_sent = False
    order.rating = None
    store.orders.add(order)
    store.flush()
    return order


def process_cart_items(store, customer_id, order: Order, commit: bool = True) -> list[OrderItem]:
    """Move every cart line of the customer onto ``order``, snapshotting unit prices."""
    require_customer_id(customer_id)
    items = get_cart_items(store, customer_id)
    if not items:
        return []

    created = []
    for item in items:
        product = store.products.find(item.product_id)
        if product is None:
            logger.warning(
                "Cart line skipped: product %s no longer exists (customer=%s)",
                item.product_id, customer_id,
            )
            store.cart_items.remove(item)
            continue

        line = OrderItem(
            order_id=order.id,
            product_id=product.id,
            product_name=product.name,
            quantity=int(item.quantity),
            price=Decimal(str(product.price)),
        )
        store.order_items.add(line)
        store.cart_items.remove(item)
        created.append(line)

    if commit:
        store.commit()
    return created


def place_order(store, verifier: DiscountCodeVerifier, customer_id, order: Order,
                payment: Payment, discount_code: str | None = None) -> CheckoutResult:
    require_customer_id(customer_id)

    items = get_cart_items(store, customer_id)
    if not items:
        raise InvalidInput("Cart is empty.")

    payment.payed_amount = cart_subtotal(store, items)
    totals = calculate_discount(payment, Discount(code=discount_code), verifier)

    try:
        save_payment_data(store, payment, totals.total_with_discount, totals.discount_id)
        save_order_data(store, order, customer_id, payment, totals.total_with_discount)
        lines = process_cart_items(store, customer_id, order, commit=False)
        store.commit()
    except CheckoutError:
        store.rollback()
        raise
    except Exception as e:
        store.rollback()
        logger.exception("Checkout failed for customer %s", customer_id)
        raise PersistenceFailure(f"Checkout failed: {e}") from e

    logger.info(
        "Order #%s placed: customer=%s payment=#%s total=%s discount=%s",
        order.id, customer_id, payment.id, totals.total_with_discount, totals.discount_id,
    )
    return CheckoutResult(order=order, payment=payment, totals=totals, items=lines)
