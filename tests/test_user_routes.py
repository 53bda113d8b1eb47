from sqlalchemy.exc import OperationalError

from storefront.extensions import db
from storefront.model import CartEntry, Order, Opinion
from storefront.services import cart_service, checkout


def test_cart_requires_token(client, seed):
    r = client.get("/api/user/cart")
    assert r.status_code == 401
    assert r.get_json()["status"] is False


def test_admin_token_is_not_a_user_token(client, admin_headers):
    r = client.get("/api/user/cart", headers=admin_headers)
    assert r.status_code == 401


def test_add_get_and_remove_cart_items(client, user_headers):
    r = client.post("/api/user/addToCart", json={"productId": 7, "amount": 2}, headers=user_headers)
    assert r.status_code == 200
    assert r.get_json()["message"] == "Successfully added to cart!"

    r = client.post("/api/user/addToCart", json={"productId": 9, "amount": 1}, headers=user_headers)
    assert r.status_code == 200

    body = client.get("/api/user/cart", headers=user_headers).get_json()
    items = body["data"]["items"]
    assert [(i["product_id"], i["amount"]) for i in items] == [(7, 2), (9, 1)]
    assert body["data"]["total"] == 55.0

    r = client.delete("/api/user/cart/7", headers=user_headers)
    assert r.status_code == 200
    r = client.delete("/api/user/cart/7", headers=user_headers)
    assert r.status_code == 400
    assert [e.product_id for e in CartEntry.query.filter_by(client_id=42)] == [9]


def test_add_to_cart_twice_conflicts(client, user_headers):
    client.post("/api/user/addToCart", json={"productId": 7, "amount": 1}, headers=user_headers)
    r = client.post("/api/user/addToCart", json={"productId": 7, "amount": 3}, headers=user_headers)
    assert r.status_code == 409
    assert CartEntry.query.filter_by(client_id=42, product_id=7).one().amount == 1


def test_add_to_cart_validation(client, user_headers):
    assert client.post("/api/user/addToCart", json={}, headers=user_headers).status_code == 422
    r = client.post("/api/user/addToCart", json={"productId": 7, "amount": 0}, headers=user_headers)
    assert r.status_code == 422
    r = client.post("/api/user/addToCart", json={"productId": 11, "amount": 1}, headers=user_headers)
    assert r.status_code == 404
    r = client.post("/api/user/addToCart", json={"productId": 12345, "amount": 1}, headers=user_headers)
    assert r.status_code == 404


def test_put_order_checks_out_the_cart(client, user_headers, fill_cart):
    fill_cart()

    r = client.put(
        "/api/user/order",
        json={"code": "", "address": "Main St", "city": "Springfield"},
        headers=user_headers,
    )

    assert r.status_code == 200
    body = r.get_json()
    assert body["message"] == "Successfully created order!"
    order_id = body["data"]["order_id"]

    cart = client.get("/api/user/cart", headers=user_headers).get_json()
    assert cart["data"]["items"] == []

    details = client.get(f"/api/user/getOrderDetails/{order_id}", headers=user_headers).get_json()
    products = details["data"]["order"]["products"]
    assert [(p["product_id"], p["amount"]) for p in products] == [(7, 2), (9, 1)]
    assert details["data"]["order"]["status"] == "packing"


def test_put_order_with_unknown_code(client, user_headers, fill_cart):
    fill_cart()

    r = client.put("/api/user/order", json={"code": "BOGUS", "address": "a", "city": "b"}, headers=user_headers)

    assert r.status_code == 422
    assert Order.query.count() == 0
    assert CartEntry.query.filter_by(client_id=42).count() == 2


def test_put_order_database_failure_is_500(client, user_headers, fill_cart, monkeypatch):
    fill_cart()

    def _fail(conn, order_id, snapshot):
        raise OperationalError("INSERT INTO order_product", {}, Exception("connection lost"))

    monkeypatch.setattr(checkout, "_insert_lines", _fail)

    r = client.put("/api/user/order", json={"address": "a", "city": "b"}, headers=user_headers)

    assert r.status_code == 500
    body = r.get_json()
    assert body["status"] is False
    assert body["message"] == "Failed to create order"
    assert Order.query.count() == 0
    assert CartEntry.query.filter_by(client_id=42).count() == 2


def test_unhandled_database_error_uses_envelope(client, user_headers, monkeypatch):
    def _fail(client_id):
        raise OperationalError("SELECT FROM products_in_carts", {}, Exception("connection lost"))

    monkeypatch.setattr(cart_service, "cart_items", _fail)

    r = client.get("/api/user/cart", headers=user_headers)

    assert r.status_code == 500
    body = r.get_json()
    assert body["status"] is False
    assert body["message"] == "Internal server error"


def test_order_history_and_ownership(client, user_headers, other_headers, fill_cart):
    fill_cart()
    client.put("/api/user/order", json={"address": "Main St", "city": "Springfield"}, headers=user_headers)
    client.put("/api/user/order", json={"address": "Main St", "city": "Springfield"}, headers=user_headers)

    history = client.get("/api/user/getOrderHistory", headers=user_headers).get_json()["data"]["orders"]
    assert len(history) == 2
    assert all(o["client_id"] == 42 for o in history)

    order_id = history[0]["order_id"]
    r = client.get(f"/api/user/getOrderDetails/{order_id}", headers=other_headers)
    assert r.status_code == 404
    assert client.get("/api/user/getOrderHistory", headers=other_headers).get_json()["data"]["orders"] == []


def test_user_data_and_change(client, user_headers):
    data = client.get("/api/user/userData", headers=user_headers).get_json()["data"]["user"]
    assert data["email"] == "jan@example.com"
    assert "password" not in data

    r = client.put(
        "/api/user/changeUserData",
        json={"address": "Elm St", "birth_date": "1990-05-01", "email": "hacker@example.com"},
        headers=user_headers,
    )
    assert r.status_code == 200
    user = r.get_json()["data"]["user"]
    assert user["address"] == "Elm St"
    assert user["birth_date"] == "1990-05-01"
    assert user["email"] == "jan@example.com"


def test_change_user_data_rejects_bad_input(client, user_headers):
    assert client.put("/api/user/changeUserData", json={}, headers=user_headers).status_code == 404
    r = client.put("/api/user/changeUserData", json={"birth_date": "yesterday"}, headers=user_headers)
    assert r.status_code == 422
    r = client.put("/api/user/changeUserData", json={"first_name": "  "}, headers=user_headers)
    assert r.status_code == 422


def test_add_opinion(client, user_headers):
    payload = {"productId": 7, "opinion": "Solid mug", "grade": 4}
    r = client.post("/api/user/opinion/add", json=payload, headers=user_headers)
    assert r.status_code == 201
    assert db.session.get(Opinion, (7, 42)).grade == 4

    r = client.post("/api/user/opinion/add", json=payload, headers=user_headers)
    assert r.status_code == 409

    r = client.post("/api/user/opinion/add", json={"productId": 9, "grade": 6}, headers=user_headers)
    assert r.status_code == 422


def test_check_code_is_public(client, seed):
    r = client.get("/api/user/checkCode?code=SAVE10")
    assert r.get_json()["message"] == "Correct code"
    assert r.get_json()["data"]["discount_percent"] == 10

    r = client.get("/api/user/checkCode?code=nope")
    assert r.status_code == 200
    assert r.get_json()["message"] == "Wrong code"
