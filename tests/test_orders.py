"""
Order request tests.

Tests:
1-3. Order numbers and validation
4-6. submit_order (stores snapshot, clears cart, empty cart rejected)
7-10. Endpoints
"""

import pytest

from quantitativo import models
from quantitativo.cart import CartLedger, CartStore
from quantitativo.orders import (
    CONFIRMATION_MESSAGE,
    OrderError,
    generate_order_number,
    list_orders,
    submit_order,
)
from quantitativo.schemas import CartItem, OrderCreate


CONTACT = {"customer_name": "Maria Obra", "email": "obra@construtora.com", "phone": "51 99999-0000"}


@pytest.fixture
def ledger(db):
    ledger = CartLedger(CartStore(db), "order-cart")
    ledger.add(CartItem(
        product_id="2", product_name="254 Platinum", quantity=3,
        area=10.0, area_name="Banheiro", total_amount=50.0,
    ))
    return ledger


# ============================================================
# Validation
# ============================================================

def test_first_order_number(db):
    number = generate_order_number(db)
    assert number.startswith("PED-")
    assert number.endswith("-0001")


@pytest.mark.parametrize("missing", ["customer_name", "email", "phone"])
def test_missing_contact_field_rejected(db, ledger, missing):
    data = dict(CONTACT)
    data[missing] = "  "
    with pytest.raises(OrderError) as exc:
        submit_order(db, ledger, ledger.key, OrderCreate(**data))
    assert missing in str(exc.value)
    # Cart untouched
    assert len(ledger) == 1


def test_empty_cart_rejected(db):
    empty = CartLedger(CartStore(db), "empty")
    with pytest.raises(OrderError):
        submit_order(db, empty, empty.key, OrderCreate(**CONTACT))
    assert db.query(models.Order).count() == 0


# ============================================================
# Submit
# ============================================================

def test_submit_stores_snapshot_and_clears_cart(db, ledger):
    order = submit_order(db, ledger, ledger.key, OrderCreate(notes="Entregar pela manhã", **CONTACT))
    assert order.order_number.endswith("-0001")
    assert order.owner_key == "order-cart"
    assert order.items_json[0]["product_id"] == "2"
    assert order.total == 0
    assert order.status == models.OrderStatus.SUBMITTED
    assert len(ledger) == 0
    assert CartLedger(CartStore(db), "order-cart").list() == []


def test_order_numbers_increment(db, ledger):
    submit_order(db, ledger, ledger.key, OrderCreate(**CONTACT))
    ledger.add(CartItem(product_id="3", product_name="HYDRO BAN®", quantity=1,
                        area=5.0, area_name="Box", total_amount=6.0))
    second = submit_order(db, ledger, ledger.key, OrderCreate(**CONTACT))
    assert second.order_number.endswith("-0002")


def _refill(ledger):
    ledger.add(CartItem(product_id="3", product_name="HYDRO BAN®", quantity=1,
                        area=5.0, area_name="Box", total_amount=6.0))


def test_order_number_collision_retries_once(db, ledger, monkeypatch):
    first = submit_order(db, ledger, ledger.key, OrderCreate(**CONTACT))
    _refill(ledger)

    numbers = iter([first.order_number, "PED-2099-0042"])
    monkeypatch.setattr("quantitativo.orders.generate_order_number", lambda db: next(numbers))
    second = submit_order(db, ledger, ledger.key, OrderCreate(**CONTACT))

    assert second.order_number == "PED-2099-0042"
    assert db.query(models.Order).count() == 2
    assert len(ledger) == 0


def test_order_number_collision_exhausted_keeps_cart(db, ledger, monkeypatch):
    first = submit_order(db, ledger, ledger.key, OrderCreate(**CONTACT))
    _refill(ledger)

    taken = first.order_number
    monkeypatch.setattr("quantitativo.orders.generate_order_number", lambda db: taken)
    with pytest.raises(OrderError):
        submit_order(db, ledger, ledger.key, OrderCreate(**CONTACT))
    assert db.query(models.Order).count() == 1
    assert len(ledger) == 1


def test_list_orders_by_owner(db, ledger):
    submit_order(db, ledger, ledger.key, OrderCreate(**CONTACT))
    assert len(list_orders(db, "order-cart")) == 1
    assert list_orders(db, "someone-else") == []


# ============================================================
# Endpoints
# ============================================================

def test_create_order_endpoint(client, auth_headers):
    client.post("/api/cart/items", json={
        "product_id": "2", "area": "10", "area_name": "Banheiro",
    }, headers=auth_headers)

    resp = client.post("/api/orders", json=CONTACT, headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == CONFIRMATION_MESSAGE
    assert data["order"]["status"] == "submitted"
    assert len(data["order"]["items"]) == 1
    assert client.get("/api/cart", headers=auth_headers).json()["count"] == 0


def test_create_order_with_empty_cart(client, auth_headers):
    resp = client.post("/api/orders", json=CONTACT, headers=auth_headers)
    assert resp.status_code == 422


def test_create_order_missing_phone(client, auth_headers):
    client.post("/api/cart/items", json={
        "product_id": "2", "area": "10", "area_name": "Banheiro",
    }, headers=auth_headers)
    resp = client.post("/api/orders", json={"customer_name": "Maria", "email": "m@x.com"},
                       headers=auth_headers)
    assert resp.status_code == 422
    assert client.get("/api/cart", headers=auth_headers).json()["count"] == 1


def test_list_orders_endpoint(client, auth_headers):
    client.post("/api/cart/items", json={
        "product_id": "2", "area": "10", "area_name": "Banheiro",
    }, headers=auth_headers)
    client.post("/api/orders", json=CONTACT, headers=auth_headers)
    orders = client.get("/api/orders", headers=auth_headers).json()
    assert len(orders) == 1
    assert orders[0]["customer_name"] == "Maria Obra"
