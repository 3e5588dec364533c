# ayana/models/order.py
from datetime import datetime
from ayana.extensions import db


class Order(db.Model):
    __tablename__ = "order"

    id = db.Column(db.Integer, primary_key=True)
    delivery_date = db.Column(db.DateTime, nullable=True)
    personal_message = db.Column(db.Text, nullable=True)
    total_amount_to_pay = db.Column(db.Numeric(10, 2), nullable=True)

    customer_id = db.Column(db.Integer, db.ForeignKey("customer.id"), nullable=False)
    payment_id = db.Column(db.Integer, db.ForeignKey("payment.id"), nullable=False, unique=True)
    payment = db.relationship("Payment")

    # fulfilment / rating flows update these later
    is_order_sent = db.Column(db.Boolean, nullable=False, default=False)
    rating = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    items = db.relationship("OrderItem", backref="order", lazy=True, cascade="all, delete")

    def __repr__(self):
        return f"<Order #{self.id} customer={self.customer_id} payment={self.payment_id}>"
