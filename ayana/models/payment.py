# ayana/models/payment.py
from datetime import datetime
from enum import Enum
from ayana.extensions import db


class PaymentType(Enum):
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    CASH_ON_DELIVERY = "cash_on_delivery"


class Payment(db.Model):
    """Created once per checkout and never changed afterwards."""

    __tablename__ = "payment"

    id = db.Column(db.Integer, primary_key=True)
    bank_account = db.Column(db.String(34), nullable=True)
    delivery_address = db.Column(db.Text, nullable=False)
    payment_type = db.Column(db.String(32), nullable=False, default=PaymentType.CARD.value)
    payed_amount = db.Column(db.Numeric(10, 2), nullable=True)

    discount_id = db.Column(db.Integer, db.ForeignKey("discount.id"), nullable=True)
    discount = db.relationship("Discount")

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Payment #{self.id} {self.payed_amount} ({self.payment_type})>"
