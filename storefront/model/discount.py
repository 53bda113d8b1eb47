# --- storefront/model/discount.py ---

from ..extensions import db


class DiscountCode(db.Model):
    __tablename__ = "discount_code"

    code = db.Column(db.String(64), primary_key=True)
    discount_percent = db.Column(db.Integer, nullable=False)
    admin_id = db.Column(db.Integer, db.ForeignKey("admin.admin_id"), nullable=True)

    def as_dict(self):
        return {
            "code": self.code,
            "discount_percent": self.discount_percent,
            "admin_id": self.admin_id,
        }
