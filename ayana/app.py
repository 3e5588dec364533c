# ayana/app.py
import logging

# Show INFO logs even outside the werkzeug access log
logging.basicConfig(level=logging.INFO)

from flask import Flask, jsonify
from ayana.config import Config

# Extensions
from ayana.extensions import db, login_manager, bcrypt, migrate, cors, init_mail

# Blueprints
from ayana.auth import auth_bp
from ayana.api.routes.cart_routes import cart_bp
from ayana.api.routes.order_routes import order_bp
from ayana.commands import register_commands
from ayana.errors import CheckoutError
from ayana import models as _models  # noqa: F401


def create_app(config_object=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    bcrypt.init_app(app)
    init_mail(app)

    cors.init_app(
        app,
        resources={
            r"/cart/*": {"origins": app.config["CORS_ORIGINS"], "supports_credentials": True},
            r"/orders/*": {"origins": app.config["CORS_ORIGINS"], "supports_credentials": True},
            r"/auth/*": {"origins": app.config["CORS_ORIGINS"], "supports_credentials": True},
        },
    )

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(order_bp)

    register_error_handlers(app)
    register_commands(app)

    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    return app


def register_error_handlers(app: Flask) -> None:

    @app.errorhandler(CheckoutError)
    def _checkout_error(e: CheckoutError):
        if e.status_code >= 500:
            app.logger.error("%s: %s", type(e).__name__, e.message)
        else:
            app.logger.info("%s: %s", type(e).__name__, e.message)
        return jsonify({"ok": False, "error": e.message}), e.status_code
