"""Shared fixtures: a fresh app + sqlite file per test."""
from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash

from storefront import create_app
from storefront.config import TestConfig
from storefront.extensions import db
from storefront.model import Admin, CartEntry, DiscountCode, Product, User


@pytest.fixture
def app(tmp_path):
    app = create_app(TestConfig, SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'test.db'}")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seed(app):
    """Client 42 (password 'secret'), admin 1 (password 'adminpass'), products 7/9/11 (11 inactive)."""
    user = User(
        user_id=42,
        first_name="Jan",
        last_name="Kowalski",
        email="jan@example.com",
        address="Main St",
        address_city="Springfield",
        password=generate_password_hash("secret"),
    )
    other = User(
        user_id=43,
        first_name="Anna",
        last_name="Nowak",
        email="anna@example.com",
        password=generate_password_hash("secret"),
    )
    admin = Admin(admin_id=1, username="root", password=generate_password_hash("adminpass"))
    db.session.add_all([
        user,
        other,
        admin,
        Product(product_id=7, name="Mug", category="kitchen", price=Decimal("12.50")),
        Product(product_id=9, name="Teapot", category="kitchen", price=Decimal("30.00")),
        Product(product_id=11, name="Old lamp", category="home", price=Decimal("5.00"), active=False),
    ])
    db.session.commit()
    db.session.add(DiscountCode(code="SAVE10", discount_percent=10, admin_id=1))
    db.session.commit()
    return {"user": user, "other": other, "admin": admin}


@pytest.fixture
def fill_cart(app, seed):
    def _fill(client_id=42, items=((7, 2), (9, 1))):
        for pid, amount in items:
            db.session.add(CartEntry(client_id=client_id, product_id=pid, amount=amount))
        db.session.commit()
    return _fill


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(app, seed):
    token = create_access_token(identity="42", additional_claims={"email": "jan@example.com", "role": "user"})
    return _bearer(token)


@pytest.fixture
def other_headers(app, seed):
    token = create_access_token(identity="43", additional_claims={"email": "anna@example.com", "role": "user"})
    return _bearer(token)


@pytest.fixture
def admin_headers(app, seed):
    token = create_access_token(identity="1", additional_claims={"email": "root", "role": "admin"})
    return _bearer(token)
