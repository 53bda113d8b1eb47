# storefront/admin/routes.py
from flask import current_app, request
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash

from . import bp
from ..extensions import db
from ..model import Admin, Order, ORDER_STATUSES
from ..services import discount_service
from ..utils.api import err, ok
from ..utils.decorators import admin_required, current_identity


@bp.get("/getOrderDetails/<int:order_id>")
@admin_required
def order_details(order_id: int):
    o = db.session.get(Order, order_id)
    if not o:
        return err("order not found", 404)
    return ok("order", {"order": o.as_api()})


@bp.put("/updateOrderStatus/<int:order_id>")
@admin_required
def update_order_status(order_id: int):
    data = request.get_json(silent=True) or {}
    status = (data.get("status") or "").strip().lower()
    if status not in ORDER_STATUSES:
        return err(f"status must be one of: {', '.join(ORDER_STATUSES)}", 400)

    o = db.session.get(Order, order_id)
    if not o:
        return err("Order not found or update failed", 400)

    previous, o.status = o.status, status
    db.session.commit()
    current_app.logger.info("order %s status %s -> %s by admin %s", order_id, previous, status, current_identity())
    return ok("success", {"order": o.as_api(with_lines=False)})


@bp.get("/getCodes")
@admin_required
def get_codes():
    return ok("codes", {"codes": [c.as_dict() for c in discount_service.list_codes()]})


@bp.post("/addNewCode")
@admin_required
def add_new_code():
    """
    Body: { "code": str, "discount_percent": int }
    """
    data = request.get_json(silent=True) or {}
    if not data.get("code") or not data.get("discount_percent"):
        return err("Invalid input data", 400)
    try:
        code = discount_service.create_code(data["code"], data["discount_percent"], current_identity())
    except discount_service.DuplicateCode:
        return err("code already in database", 409)
    return ok("Discount code added successfully", {"code": code.as_dict()}, status=201)


@bp.post("/addNewAdmin")
@admin_required
def add_new_admin():
    data = request.get_json(silent=True) or {}
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    if not username or not password:
        return err("Invalid input data", 400)

    a = Admin(username=username, password=generate_password_hash(password))
    db.session.add(a)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return err("Username already exists", 409)
    return ok("Admin added successfully", {"admin": a.as_dict()}, status=201)
