# ayana/services/cart.py
"""Cart store: per-customer cart lines keyed by (customer, product).

Functions stage their changes on the store; whoever calls them commits.
"""
from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from ayana.errors import InvalidInput, NotFound
from ayana.models import CartItem

logger = logging.getLogger(__name__)


def require_customer_id(customer_id):
    if customer_id is None or str(customer_id).strip() == "":
        raise InvalidInput("Customer identifier is required.")
    return customer_id


def add_to_cart(store, customer_id, product_id) -> None:
    require_customer_id(customer_id)
    if store.products.find(product_id) is None:
        raise NotFound(f"Product {product_id} does not exist.")

    if store.cart_items.increment(customer_id, product_id, 1):
        return

    item = CartItem(
        customer_id=customer_id,
        product_id=product_id,
        quantity=1,
        added_at=datetime.utcnow(),
    )
    if store.cart_items.insert(item):
        logger.info("Cart line created: customer=%s product=%s", customer_id, product_id)
        return

    # a concurrent request inserted the row first
    store.cart_items.increment(customer_id, product_id, 1)


def remove_item(store, customer_id, product_id) -> bool:
    """Take one piece off the line; drop the line when it was the last one."""
    require_customer_id(customer_id)

    if store.cart_items.increment(customer_id, product_id, -1):
        return True

    item = store.cart_items.find((customer_id, product_id))
    if item is None:
        return False

    store.cart_items.remove(item)
    logger.info("Cart line removed: customer=%s product=%s", customer_id, product_id)
    return True


def get_cart_items(store, customer_id) -> list[CartItem]:
    require_customer_id(customer_id)
    return store.cart_items.filter_by(customer_id=customer_id)


def get_cart_products(store, items) -> list[list]:
    groups = []
    for item in items:
        product = store.products.find(item.product_id)
        groups.append([product] if product is not None else [])
    return groups


def cart_subtotal(store, items) -> Decimal:
    total = Decimal("0.00")
    for item, products in zip(items, get_cart_products(store, items)):
        for product in products:
            total += Decimal(str(product.price)) * int(item.quantity)
    return total
