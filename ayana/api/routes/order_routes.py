# ayana/api/routes/order_routes.py
from flask import Blueprint, jsonify, request, url_for

from ayana.api.schemas import CheckoutRequest
from ayana.api.utils.store import get_store, get_verifier
from ayana.auth import with_customer
from ayana.errors import NotFound
from ayana.models import Order, Payment
from ayana.services.checkout import place_order
from ayana.services.notifications import send_order_confirmation

order_bp = Blueprint("order_bp", __name__, url_prefix="/orders")

ORDER_TYPE = "order"


def _order_dict(o: Order) -> dict:
    p = o.payment
    return {
        "id": o.id,
        "deliveryDate": o.delivery_date.isoformat() if o.delivery_date else None,
        "personalMessage": o.personal_message,
        "totalAmountToPay": float(o.total_amount_to_pay) if o.total_amount_to_pay is not None else None,
        "isOrderSent": bool(o.is_order_sent),
        "rating": o.rating,
        "created_at": o.created_at.isoformat() if o.created_at else None,
        "payment": {
            "id": p.id,
            "paymentType": p.payment_type,
            "deliveryAddress": p.delivery_address,
            "payedAmount": float(p.payed_amount) if p.payed_amount is not None else None,
            "discountId": p.discount_id,
        } if p else None,
        "items": [
            {
                "id": it.id,
                "productId": it.product_id,
                "name": it.product_name,
                "quantity": it.quantity,
                "price": float(it.price),
                "subtotal": float(it.price) * it.quantity,
            } for it in o.items
        ],
    }


@order_bp.post("")
@with_customer
def create_order(ctx):
    payload = CheckoutRequest.from_payload(request.get_json(silent=True) or request.form or {})

    order = Order(
        delivery_date=payload.delivery_date,
        personal_message=payload.personal_message,
    )
    payment = Payment(
        bank_account=payload.bank_account,
        delivery_address=payload.delivery_address,
        payment_type=payload.payment_type.value,
    )

    result = place_order(
        get_store(),
        get_verifier(),
        ctx.customer_id,
        order,
        payment,
        discount_code=payload.discount_code,
    )
    send_order_confirmation(ctx.customer, result)

    return jsonify({
        "ok": True,
        "orderId": order.id,
        "paymentId": payment.id,
        "totalAmountToPay": float(result.totals.total_with_discount),
        "discountId": result.totals.discount_id,
        "discountAmount": float(result.totals.discount_amount),
        "redirect": {
            "action": "thank_you",
            "url": url_for("order_bp.thank_you", orderType=ORDER_TYPE),
            "params": {"orderType": ORDER_TYPE},
        },
    }), 201


@order_bp.get("/thank-you")
def thank_you():
    return jsonify({
        "ok": True,
        "view": "thank_you",
        "orderType": request.args.get("orderType", ""),
    }), 200


@order_bp.get("/<int:order_id>")
@with_customer
def get_order(ctx, order_id: int):
    o = get_store().orders.find(order_id)
    if o is None or o.customer_id != ctx.customer_id:
        raise NotFound(f"Order {order_id} does not exist.")
    return jsonify({"ok": True, "order": _order_dict(o)}), 200
