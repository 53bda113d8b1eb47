# storefront/errors.py
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .extensions import db, jwt
from .utils.api import err


def register_error_handlers(app):
    @app.errorhandler(ValueError)
    def handle_value_error(e):
        return err(str(e), 422)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return err(e.description or e.name, e.code or 500)

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(e):
        db.session.rollback()
        current_app.logger.exception("database error: %s", e)
        return err("Internal server error", 500)


@jwt.unauthorized_loader
def _missing_token(reason):
    return err("Missing token", 401, {"valid": False, "reason": reason})


@jwt.invalid_token_loader
def _invalid_token(reason):
    return err("Invalid token", 401, {"valid": False, "reason": reason})


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return err("Token expired", 401, {"valid": False})
