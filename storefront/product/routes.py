from flask import Response

from . import bp
from ..extensions import db
from ..model import Image, Product
from ..services import opinion_service
from ..utils.api import err, ok


@bp.get("/api/getShopItems")
def list_products():
    items = Product.query.filter_by(active=True).order_by(Product.product_id.asc()).all()
    return ok("products", {"products": [p.as_api() for p in items]})


@bp.get("/api/getCategories")
def list_categories():
    rows = (db.session.query(Product.category)
            .filter(Product.active.is_(True), Product.category.isnot(None))
            .distinct()
            .order_by(Product.category.asc())
            .all())
    return ok("categories", {"categories": [r.category for r in rows]})


@bp.get("/api/product/<int:product_id>")
def get_product(product_id: int):
    p = db.session.get(Product, product_id)
    if not p:
        return err("product not found", 404)
    return ok("product", {"product": p.as_api()})


@bp.get("/api/opinions/<int:product_id>")
def get_opinions(product_id: int):
    ops = opinion_service.opinions_for(product_id)
    return ok("opinions", {"opinions": [o.as_api() for o in ops]})


@bp.get("/api/getProductGrade/<int:product_id>")
def get_product_grade(product_id: int):
    return ok("grade", opinion_service.product_grade(product_id))


@bp.get("/image/<int:image_id>")
def get_image(image_id: int):
    img = db.session.get(Image, image_id)
    if not img:
        return err("no image available", 404)
    return Response(
        img.image,
        mimetype="image/jpeg",
        headers={"Content-Disposition": f'inline; filename="image_{image_id}"'},
    )
