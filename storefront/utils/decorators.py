# ------- storefront/utils/decorators.py -------
from functools import wraps

from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from ..extensions import db
from ..model import User
from .api import err

ROLE_USER = "user"
ROLE_ADMIN = "admin"


def current_identity() -> int | None:
    uid = get_jwt_identity()
    try:
        return int(uid)
    except (TypeError, ValueError):
        return None


def _current_user():
    verify_jwt_in_request()
    uid = current_identity()
    if uid is None or get_jwt().get("role") != ROLE_USER:
        return None
    return db.session.get(User, uid)


def role_required(*roles, message: str | None = None):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if current_identity() is None:
                return err("Unauthorized", 401)
            if get_jwt().get("role") not in roles:
                return err(message or "Forbidden", 403)
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def user_required(fn):
    """Valid user token whose account still exists."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if _current_user() is None:
            return err("Unauthorized", 401)
        return fn(*args, **kwargs)
    return wrapper


admin_required = role_required(ROLE_ADMIN, message="Admin role required")
