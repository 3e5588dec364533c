# ayana/models/discount.py
from enum import Enum
from ayana.extensions import db


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    AMOUNT_OFF = "amount_off"


class Discount(db.Model):
    __tablename__ = "discount"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=False, index=True)
    discount_type = db.Column(db.String(20), nullable=False, default=DiscountType.PERCENTAGE.value)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    begins_at = db.Column(db.DateTime, nullable=True)
    ends_at = db.Column(db.DateTime, nullable=True)

    @property
    def kind(self) -> DiscountType:
        return DiscountType(self.discount_type)

    def __repr__(self):
        return f"<Discount {self.code} {self.discount_type} {self.amount}>"
