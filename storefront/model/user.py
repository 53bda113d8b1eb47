# --- storefront/model/user.py ---

from ..extensions import db


class User(db.Model):
    __tablename__ = "user"

    user_id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    address = db.Column(db.String(255))
    address_city = db.Column(db.String(120))
    birth_date = db.Column(db.Date)
    password = db.Column(db.String(255), nullable=False)

    def as_dict(self):
        return {
            "user_id": self.user_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "address": self.address,
            "address_city": self.address_city,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
        }


class Admin(db.Model):
    __tablename__ = "admin"

    admin_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False)

    def as_dict(self):
        return {"admin_id": self.admin_id, "username": self.username}
