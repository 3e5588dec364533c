# ayana/models/cart_item.py
from datetime import datetime
from ayana.extensions import db


class CartItem(db.Model):
    """One cart line. A customer holds at most one row per product."""

    __tablename__ = "cart_item"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_cart_item_quantity_positive"),
    )

    customer_id = db.Column(db.Integer, db.ForeignKey("customer.id"), primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id"), primary_key=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    added_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    product = db.relationship("Product", lazy="joined")

    def __repr__(self):
        return f"<CartItem customer={self.customer_id} product={self.product_id} x {self.quantity}>"
