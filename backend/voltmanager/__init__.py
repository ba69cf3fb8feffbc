# backend/voltmanager/__init__.py
import time

from flask import Flask, request

from .config import Config
from .extensions import db



def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)

    # Import models so metadata is complete before create_all
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.products import products_bp
    from .routes.invoices import invoices_bp
    from .routes.repair_orders import repair_orders_bp
    from .routes.technicians import technicians_bp
    from .routes.restock import restock_bp
    from .routes.pos import pos_bp
    from .routes.calendar import calendar_bp
    from .routes.analytics import analytics_bp
    from .routes.settings import settings_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(repair_orders_bp)
    app.register_blueprint(technicians_bp)
    app.register_blueprint(restock_bp)
    app.register_blueprint(pos_bp)
    app.register_blueprint(calendar_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(settings_bp)

    @app.before_request
    def simulate_latency():
        delay_ms = app.config["SIMULATED_LATENCY_MS"]
        if delay_ms > 0 and request.path.startswith("/api/"):
            time.sleep(delay_ms / 1000)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config["CORS_ALLOWED_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,DELETE,PATCH,OPTIONS"
        return response

    # Fresh store per app: schema, then fixtures
    with app.app_context():
        db.create_all()
        if app.config["SEED_ON_STARTUP"]:
            from .services.seed_service import load_seed_data, store_is_empty
            if store_is_empty():
                load_seed_data()

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
