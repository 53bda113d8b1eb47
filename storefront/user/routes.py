# storefront/user/routes.py
from flask import request

from . import bp
from ..auth.routes import parse_birth_date
from ..extensions import db
from ..model import Order, User
from ..services import cart_service, checkout, discount_service, opinion_service
from ..utils.api import err, ok
from ..utils.decorators import current_identity, user_required

EDITABLE_FIELDS = ("first_name", "last_name", "address", "address_city", "birth_date")


@bp.get("/userData")
@user_required
def user_data():
    user = db.session.get(User, current_identity())
    return ok("user", {"user": user.as_dict()})


@bp.put("/changeUserData")
@user_required
def change_user_data():
    data = request.get_json(silent=True) or {}
    user = db.session.get(User, current_identity())

    changes = {k: data[k] for k in EDITABLE_FIELDS if k in data}
    if not changes:
        return err("Failed to update user data", 404)

    # validate everything before touching the row
    for key, value in changes.items():
        if key == "birth_date":
            changes[key] = parse_birth_date(value)
        elif key in ("first_name", "last_name"):
            changes[key] = str(value or "").strip()
            if not changes[key]:
                return err(f"{key} cannot be empty", 422)
        else:
            changes[key] = str(value or "").strip() or None

    for key, value in changes.items():
        setattr(user, key, value)
    db.session.commit()
    return ok("Successfully updated user data!", {"user": user.as_dict()})


# ---- cart -------------------------------------------------------------------

@bp.post("/addToCart")
@user_required
def add_to_cart():
    """
    Body: { "productId": int, "amount": int }
    """
    data = request.get_json(silent=True) or {}
    product_id = data.get("productId")
    if product_id is None:
        return err("productId is required", 422)

    try:
        entry = cart_service.add_to_cart(current_identity(), product_id, data.get("amount"))
    except cart_service.AlreadyInCart:
        return err("Item already in cart", 409)
    if entry is None:
        return err("product not found or inactive", 404)

    return ok("Successfully added to cart!", {"item": entry.as_api()})


@bp.get("/cart")
@user_required
def get_cart():
    items = [i.as_api() for i in cart_service.cart_items(current_identity())]
    return ok("cart", {
        "items": items,
        "total": round(sum(i["line_total"] for i in items), 2),
    })


@bp.delete("/cart/<int:product_id>")
@user_required
def remove_from_cart(product_id: int):
    if cart_service.remove_from_cart(current_identity(), product_id) > 0:
        return ok("Item removed!")
    return err("Error!", 400)


# ---- orders -----------------------------------------------------------------

@bp.put("/order")
@user_required
def create_order():
    """
    Body: { "code": str?, "address": str, "city": str }
    Converts the whole cart into one order.
    """
    data = request.get_json(silent=True) or {}
    client_id = current_identity()

    result = checkout.create_order(
        db.engine,
        client_id,
        data.get("code"),
        data.get("address"),
        data.get("city"),
    )
    if result.ok:
        return ok("Successfully created order!", {"order_id": result.order_id})

    failure = result.failure
    if isinstance(failure, checkout.InvalidDiscountCode):
        return err(failure.message, 422)
    return err("Failed to create order", 500)


@bp.get("/getOrderHistory")
@user_required
def order_history():
    orders = (Order.query
              .filter_by(client_id=current_identity())
              .order_by(Order.order_date.desc(), Order.order_id.desc())
              .all())
    return ok("orders", {"orders": [o.as_api(with_lines=False) for o in orders]})


@bp.get("/getOrderDetails/<int:order_id>")
@user_required
def order_details(order_id: int):
    o = db.session.get(Order, order_id)
    if not o or o.client_id != current_identity():
        return err("order not found", 404)
    return ok("order", {"order": o.as_api()})


# ---- opinions / codes -------------------------------------------------------

@bp.post("/opinion/add")
@user_required
def add_opinion():
    data = request.get_json(silent=True) or {}
    try:
        op = opinion_service.add_opinion(
            current_identity(), data.get("productId"), data.get("opinion"), data.get("grade"),
        )
    except opinion_service.DuplicateOpinion:
        return err("Opinion for this product from this user already exists", 409)
    if op is None:
        return err("product not found", 404)
    return ok("Opinion added successfully", {"opinion": op.as_api()}, status=201)


@bp.get("/checkCode")
def check_code():
    code = discount_service.find_code(request.args.get("code"))
    if code:
        return ok("Correct code", {"valid": True, "discount_percent": code.discount_percent})
    return ok("Wrong code", {"valid": False})
