# storefront/model/product.py
from ..extensions import db


class Product(db.Model):
    __tablename__ = "product"

    product_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    category = db.Column(db.String(120), index=True)
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    description = db.Column(db.Text)
    active = db.Column(db.Boolean, nullable=False, default=True)

    images = db.relationship(
        "Image",
        backref="product",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Image.image_id.asc()",
    )

    def as_api(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "category": self.category,
            "price": float(self.price or 0),
            "description": self.description,
            "active": self.active,
            "images": [img.image_id for img in self.images],
        }


class Image(db.Model):
    __tablename__ = "image"

    image_id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("product.product_id"), nullable=False, index=True)
    image = db.Column(db.LargeBinary, nullable=False)


class Opinion(db.Model):
    __tablename__ = "opinion"

    product_id = db.Column(db.Integer, db.ForeignKey("product.product_id"), primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey("user.user_id"), primary_key=True)
    opinion = db.Column(db.Text)
    grade = db.Column(db.Integer, nullable=False)

    author = db.relationship("User", lazy="joined")

    def as_api(self):
        return {
            "product_id": self.product_id,
            "client_id": self.client_id,
            "author": self.author.first_name if self.author else None,
            "opinion": self.opinion,
            "grade": self.grade,
        }
