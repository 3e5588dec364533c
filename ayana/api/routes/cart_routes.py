# ayana/api/routes/cart_routes.py
from decimal import Decimal

from flask import Blueprint, current_app, jsonify, request, url_for

from ayana.api.schemas import DiscountRequest
from ayana.api.utils.store import get_store, get_verifier
from ayana.auth import with_customer
from ayana.models import DiscountType
from ayana.services.cart import (
    add_to_cart,
    cart_subtotal,
    get_cart_items,
    get_cart_products,
    remove_item,
)
from ayana.services.discounts import preview_total, to_decimal

cart_bp = Blueprint("cart_bp", __name__, url_prefix="/cart")

DEFAULT_DISCOUNT_TYPE = DiscountType.AMOUNT_OFF.value


def _redirect_to_cart(discount_amount=0, discount_type=DEFAULT_DISCOUNT_TYPE, discount_code="", **extra):
    params = {
        "discountAmount": float(discount_amount),
        "discountType": discount_type,
        "discountCode": discount_code,
    }
    return jsonify({
        "ok": True,
        **extra,
        "redirect": {
            "action": "cart",
            "url": url_for("cart_bp.view_cart", **params),
            "params": params,
        },
    })


def _line_dict(item, products) -> dict:
    product = products[0] if products else None
    price = to_decimal(product.price) if product else Decimal("0")
    return {
        "productId": item.product_id,
        "name": product.name if product else None,
        "image": product.image if product else None,
        "flowerType": product.flower_type if product else None,
        "price": float(price),
        "quantity": item.quantity,
        "subtotal": float(price * item.quantity),
    }


@cart_bp.get("")
@with_customer
def view_cart(ctx):
    store = get_store()
    discount_amount = to_decimal(request.args.get("discountAmount", 0))
    discount_type = request.args.get("discountType") or DEFAULT_DISCOUNT_TYPE
    discount_code = request.args.get("discountCode", "")

    items = get_cart_items(store, ctx.customer_id)
    groups = get_cart_products(store, items)
    subtotal = cart_subtotal(store, items)

    return jsonify({
        "ok": True,
        "items": [_line_dict(it, products) for it, products in zip(items, groups)],
        "discountCode": discount_code,
        "discountAmount": float(discount_amount),
        "discountType": discount_type,
        "subtotal": float(subtotal),
        "totalAmountToPay": float(preview_total(subtotal, discount_amount, discount_type)),
    }), 200


@cart_bp.post("/items/<int:product_id>")
@with_customer
def add_item(ctx, product_id: int):
    store = get_store()
    add_to_cart(store, ctx.customer_id, product_id)
    store.commit()
    return _redirect_to_cart()


@cart_bp.delete("/items/<int:product_id>")
@with_customer
def delete_item(ctx, product_id: int):
    store = get_store()
    removed = remove_item(store, ctx.customer_id, product_id)
    if removed:
        store.commit()
    else:
        current_app.logger.info("Nothing to remove: customer=%s product=%s", ctx.customer_id, product_id)
    return _redirect_to_cart(removed=removed)


@cart_bp.post("/discount")
def apply_discount():
    payload = DiscountRequest.from_payload(request.get_json(silent=True) or request.form or {})
    outcome = get_verifier().apply_code(payload.code)

    if not outcome.applied:
        return _redirect_to_cart(discount_code=outcome.status)

    return _redirect_to_cart(
        discount_amount=outcome.discount.amount,
        discount_type=outcome.discount.discount_type,
        discount_code=outcome.status,
    )
