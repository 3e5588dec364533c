# ayana/auth/login_routes.py
from flask import Blueprint, jsonify, request
from flask_login import login_user, logout_user

from ayana.extensions import db
from ayana.models import Customer

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or request.form or {}
    username = (data.get("username") or "").strip()
    password = (data.get("password") or "").strip()

    customer = db.session.query(Customer).filter_by(username=username).first()
    if customer and customer.check_password(password):
        login_user(customer)
        return jsonify({"ok": True, "customerId": customer.id}), 200

    return jsonify({"ok": False, "error": "Invalid username or password."}), 401


@auth_bp.post("/logout")
def logout():
    logout_user()
    return jsonify({"ok": True}), 200
