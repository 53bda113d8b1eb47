import logging

from flask import Flask, jsonify

from .config import Config
from .extensions import db, jwt, cors, migrate


def create_app(config_object=None, **overrides):
    app = Flask(__name__, instance_relative_config=True)

    config_object = config_object or Config
    app.config.from_object(config_object)
    app.config.update(overrides)
    config_object.init_app(app)

    logging.getLogger("storefront").setLevel(app.config["LOG_LEVEL"])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}})
    migrate.init_app(app, db)

    from . import model  # noqa: F401  (register tables on db.metadata)
    from .errors import register_error_handlers
    from .cli import register_cli

    register_error_handlers(app)
    register_cli(app)

    # Register blueprints
    from .auth import bp as auth_bp; app.register_blueprint(auth_bp)
    from .user import bp as user_bp; app.register_blueprint(user_bp)
    from .admin import bp as admin_bp; app.register_blueprint(admin_bp)
    from .product import bp as product_bp; app.register_blueprint(product_bp)

    @app.get("/health")
    def health():
        return jsonify(ok=True, msg="API running")

    if app.config["CREATE_TABLES"]:
        with app.app_context():
            db.create_all()

    app.logger.info("storefront ready, %d blueprints", len(app.blueprints))
    return app
