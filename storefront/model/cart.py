# storefront/model/cart.py
from ..extensions import db


class CartEntry(db.Model):
    """One product line in a user's cart, unique per (client, product)."""

    __tablename__ = "products_in_carts"

    client_id = db.Column(db.Integer, db.ForeignKey("user.user_id"), primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("product.product_id"), primary_key=True)
    amount = db.Column(db.Integer, nullable=False, default=1)

    product = db.relationship("Product", lazy="joined")

    def as_api(self):
        price = float(self.product.price or 0) if self.product else 0.0
        return {
            "product_id": self.product_id,
            "name": self.product.name if self.product else None,
            "price": price,
            "amount": self.amount,
            "line_total": round(price * self.amount, 2),
        }
