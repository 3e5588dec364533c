# ayana/services/notifications.py
from __future__ import annotations

from flask import current_app

from ayana.api.utils.email import send_email


def _order_lines(items) -> list[str]:
    lines = []
    for it in items:
        lines.append(f"- {it.product_name} x {it.quantity} - {it.price:.2f} per piece")
    return lines


def send_order_confirmation(customer, result) -> None:
    """
    Confirmation to the customer and an optional owner copy.

    Mail problems are logged and swallowed: the order is already committed.
    """
    order, payment, totals = result.order, result.payment, result.totals

    body = [
        f"Hello {customer.full_name or customer.username},",
        "",
        f"thank you for your order #{order.id}.",
        f"Delivery address: {payment.delivery_address}",
    ]
    if order.delivery_date:
        body.append(f"Delivery date: {order.delivery_date:%Y-%m-%d}")
    if order.personal_message:
        body.append(f"Message: {order.personal_message}")
    body += ["", "Items:"] + _order_lines(result.items)
    if totals.discount_id is not None:
        body.append(f"Discount: {totals.discount_amount}")
    body += [
        "",
        f"Total to pay: {totals.total_with_discount:.2f}",
        "",
        "Ayana",
    ]

    try:
        send_email(
            subject=f"Order #{order.id} confirmation",
            recipients=[customer.email],
            body="\n".join(body),
        )
    except Exception:
        current_app.logger.exception("Order confirmation e-mail failed (order #%s)", order.id)

    owner = current_app.config.get("ORDER_NOTIFY_EMAIL")
    if not owner:
        return
    try:
        send_email(
            subject=f"New order #{order.id}",
            recipients=[owner],
            body=(
                f"Order #{order.id}\n"
                f"Customer: {customer.username} <{customer.email}>\n"
                f"Total: {totals.total_with_discount:.2f}"
            ),
        )
    except Exception:
        current_app.logger.exception("Owner e-mail failed (order #%s)", order.id)
