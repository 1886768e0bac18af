from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from storefront.analytics.store import clear_events, get_events
from storefront.app import app
from storefront.catalog.data_store import reset_catalog
from storefront.checkout.coupons import reset_coupons
from storefront.orders.store import clear_orders
from storefront.payments.settings import reset_settings

client = TestClient(app)

ADDRESS = {"name": "Ravi", "street": "4 Hill Rd", "city": "Mumbai", "zip_code": "400050"}


def _login_admin(c):
    c.post("/auth/login", json={"email": "admin@vasstra.in", "password": "admin123"})


def _shopper() -> TestClient:
    c = TestClient(app)
    c.post("/auth/register", json={
        "name": "Stats Shopper",
        "email": f"stats-{uuid.uuid4().hex[:8]}@example.com",
        "password": "secret1",
    })
    return c


def _reset():
    reset_catalog()
    reset_coupons()
    reset_settings()
    clear_orders()
    clear_events()


def test_stats_empty_initially():
    _reset()
    _login_admin(client)
    body = client.get("/admin/stats").json()
    assert body["total_orders"] == 0
    assert body["total_revenue"] == 0
    assert body["avg_order_value"] == 0.0
    assert body["orders_by_status"]["confirmed"] == 0
    assert body["total_users"] >= 2
    assert body["admin_users"] >= 1


def test_stats_track_orders_and_revenue():
    _reset()
    c = _shopper()
    c.post("/cart/items", json={"product_id": "p4", "quantity": 2})
    c.post("/cart/coupon", json={"code": "WELCOME100"})
    c.post("/orders", json={"shipping_address": ADDRESS, "payment_method": "card"})
    c.post("/cart/items", json={"product_id": "p10"})
    c.post("/orders", json={"shipping_address": ADDRESS, "payment_method": "card"})

    _login_admin(client)
    body = client.get("/admin/stats").json()
    assert body["total_orders"] == 2
    assert body["total_revenue"] == 10100 + 798
    assert body["orders_by_status"]["confirmed"] == 2
    assert body["top_products"][0] == {"product_id": "p4", "name": "Banarasi Silk Saree", "quantity": 2}
    assert body["coupon_usage"]["redeemed_in_orders"] == 1
    assert body["coupon_usage"]["total_discount"] == 100
    assert len(get_events("order_placed")) == 2


def test_cancelled_orders_excluded_from_revenue():
    _reset()
    c = _shopper()
    c.post("/cart/items", json={"product_id": "p4"})
    order = c.post("/orders", json={"shipping_address": ADDRESS, "payment_method": "card"}).json()["order"]

    _login_admin(client)
    client.put(f"/orders/{order['id']}/status", json={"status": "cancelled"})
    body = client.get("/admin/stats").json()
    assert body["total_orders"] == 1
    assert body["total_revenue"] == 0
    assert body["orders_by_status"]["cancelled"] == 1


def test_coupon_attempts_are_counted():
    _reset()
    c = _shopper()
    c.post("/cart/items", json={"product_id": "p5"})
    c.post("/cart/coupon", json={"code": "festive10"})
    c.post("/cart/coupon", json={"code": "SUMMER50"})
    c.post("/cart/coupon", json={"code": "NOPE"})

    _login_admin(client)
    usage = client.get("/admin/stats").json()["coupon_usage"]
    assert usage["applied"] == 1
    assert usage["rejected"] == 2
    assert usage["top_codes"] == [{"code": "FESTIVE10", "count": 1}]


def test_related_views_are_counted():
    _reset()
    client.get("/products/p1/related")
    client.get("/products/p2/related")
    _login_admin(client)
    assert client.get("/admin/stats").json()["related_views"] == 2
