from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..model import CartEntry, Product


class AlreadyInCart(Exception):
    pass


def active_product(product_id):
    product = db.session.get(Product, product_id)
    if not product or product.active is False:
        return None
    return product


def cart_items(client_id: int):
    return (CartEntry.query
            .filter_by(client_id=client_id)
            .order_by(CartEntry.product_id.asc())
            .all())


def add_to_cart(client_id: int, product_id, amount) -> CartEntry | None:
    """
    Insert a new cart row. Returns None for an unknown/inactive product,
    raises ValueError on a bad amount and AlreadyInCart on a duplicate.
    """
    try:
        amount = int(amount if amount is not None else 1)
        product_id = int(product_id)
    except (TypeError, ValueError):
        raise ValueError("productId and amount must be integers")
    if amount < 1:
        raise ValueError("amount must be >= 1")

    if active_product(product_id) is None:
        return None
    if db.session.get(CartEntry, (client_id, product_id)) is not None:
        raise AlreadyInCart(product_id)

    entry = CartEntry(client_id=client_id, product_id=product_id, amount=amount)
    db.session.add(entry)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise AlreadyInCart(product_id)
    return entry


def remove_from_cart(client_id: int, product_id: int) -> int:
    removed = CartEntry.query.filter_by(client_id=client_id, product_id=product_id).delete()
    db.session.commit()
    return removed
