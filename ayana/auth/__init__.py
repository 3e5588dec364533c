# ayana/auth/__init__.py
from .login_routes import auth_bp
from .context import CustomerContext, customer_context, with_customer

__all__ = ["auth_bp", "CustomerContext", "customer_context", "with_customer"]
