# ayana/errors.py
"""Errors raised by the cart and checkout services.

Handlers never catch these one by one; the app-level error handler turns
any ``CheckoutError`` into the usual ``{"ok": False, "error": ...}`` body.
"""


class CheckoutError(Exception):
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class InvalidInput(CheckoutError):
    """Missing or malformed input; aborts before anything is staged."""


class MissingIdentity(InvalidInput):
    status_code = 401

    def __init__(self, message: str = "Customer identity is required."):
        super().__init__(message)


class NotFound(CheckoutError):
    status_code = 404


class InvalidDiscount(CheckoutError):
    """Unknown or expired discount code. Checkout degrades to full price."""


class PersistenceFailure(CheckoutError):
    status_code = 500
