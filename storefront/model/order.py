# storefront/model/order.py
from sqlalchemy.sql import func

from ..extensions import db

INITIAL_STATUS = "packing"
ORDER_STATUSES = ("packing", "shipped", "delivered", "cancelled")


class Order(db.Model):
    __tablename__ = "order"

    order_id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey("user.user_id"), nullable=False, index=True)
    order_date = db.Column(db.DateTime, server_default=func.now(), index=True)
    status = db.Column(db.String(20), nullable=False, default=INITIAL_STATUS, index=True)
    discount_code = db.Column(db.String(64), db.ForeignKey("discount_code.code"), nullable=True)

    # Shipping snapshot
    address = db.Column(db.String(255))
    city = db.Column(db.String(120))

    lines = db.relationship(
        "OrderProduct",
        backref="order",
        lazy="selectin",
        order_by="OrderProduct.product_id.asc()",
    )
    discount = db.relationship("DiscountCode", lazy="joined")

    def subtotal(self) -> float:
        return round(sum(line.line_total() for line in self.lines), 2)

    def total(self) -> float:
        sub = self.subtotal()
        if self.discount:
            sub = sub * (100 - self.discount.discount_percent) / 100
        return round(max(sub, 0.0), 2)

    def as_api(self, with_lines=True):
        out = {
            "order_id": self.order_id,
            "client_id": self.client_id,
            "order_date": self.order_date.isoformat() if self.order_date else None,
            "status": self.status,
            "discount_code": self.discount_code,
            "address": self.address,
            "city": self.city,
            "subtotal": self.subtotal(),
            "total": self.total(),
        }
        if with_lines:
            out["products"] = [line.as_api() for line in self.lines]
        return out


class OrderProduct(db.Model):
    __tablename__ = "order_product"

    order_id = db.Column(db.Integer, db.ForeignKey("order.order_id"), primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("product.product_id"), primary_key=True)
    amount = db.Column(db.Integer, nullable=False)

    product = db.relationship("Product", lazy="joined")

    def line_total(self) -> float:
        price = float(self.product.price or 0) if self.product else 0.0
        return price * self.amount

    def as_api(self):
        return {
            "product_id": self.product_id,
            "amount": self.amount,
            "name": self.product.name if self.product else None,
            "price": float(self.product.price or 0) if self.product else None,
        }
