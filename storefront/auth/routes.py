from datetime import date

from flask import current_app, request
from flask_jwt_extended import create_access_token, get_jwt, jwt_required
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from . import bp
from ..extensions import db
from ..model import Admin, User
from ..utils.api import err, ok
from ..utils.decorators import ROLE_ADMIN, ROLE_USER, admin_required

REQUIRED_FIELDS = ("first_name", "last_name", "email", "password")


def parse_birth_date(value):
    if value in (None, ""):
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValueError("birth_date must be YYYY-MM-DD")


def _issue_token(identity: int, email: str, role: str) -> str:
    return create_access_token(
        identity=str(identity),
        additional_claims={"email": email, "role": role},
    )


@bp.post("/register")
def register():
    data = request.get_json(silent=True) or {}
    fields = {k: str(data.get(k) or "").strip() for k in (*REQUIRED_FIELDS, "address", "address_city")}
    missing = [f for f in REQUIRED_FIELDS if not fields[f]]
    if missing:
        return err(f"Missing fields: {', '.join(missing)}", 400)

    email = fields["email"].lower()
    if User.query.filter_by(email=email).first():
        return err("Email already in use. Please use a different email address.", 409)

    user = User(
        first_name=fields["first_name"],
        last_name=fields["last_name"],
        email=email,
        address=fields["address"] or None,
        address_city=fields["address_city"] or None,
        birth_date=parse_birth_date(data.get("birth_date")),
        password=generate_password_hash(str(data["password"])),
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return err("Email already in use. Please use a different email address.", 409)

    current_app.logger.info("user %s registered", user.user_id)
    return ok("Successfully created account!", {"user": user.as_dict()}, status=201)


@bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("username") or data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    user = User.query.filter_by(email=email).first() if email else None
    if not user or not check_password_hash(user.password, password):
        return err("wrong username or password!", 400)

    token = _issue_token(user.user_id, user.email, ROLE_USER)
    return ok("Successfully logged in!", {"token": token})


@bp.get("/verifyToken")
@jwt_required()
def verify_token():
    claims = get_jwt()
    return ok("verified", {
        "valid": True,
        "user": {"id": claims.get("sub"), "email": claims.get("email"), "role": claims.get("role")},
    })


@bp.post("/admin/login")
def admin_login():
    data = request.get_json(silent=True) or {}
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    admin = Admin.query.filter_by(username=username).first() if username else None
    if not admin or not check_password_hash(admin.password, password):
        return err("wrong username or password!", 400)

    token = _issue_token(admin.admin_id, admin.username, ROLE_ADMIN)
    return ok("Successfully logged in!", {"success": True, "token": token})


@bp.get("/admin/check-token")
@admin_required
def admin_check_token():
    return ok("verified")
