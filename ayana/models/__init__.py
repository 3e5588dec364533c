# ayana/models/__init__.py
from .customer import Customer
from .product import Product
from .cart_item import CartItem
from .discount import Discount, DiscountType
from .payment import Payment, PaymentType
from .order import Order
from .order_item import OrderItem

__all__ = [
    "Customer",
    "Product",
    "CartItem",
    "Discount",
    "DiscountType",
    "Payment",
    "PaymentType",
    "Order",
    "OrderItem",
]
