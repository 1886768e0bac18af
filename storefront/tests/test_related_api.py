from __future__ import annotations

from fastapi.testclient import TestClient

from storefront.app import app
from storefront.catalog.data_store import reset_catalog, update_product
from storefront.catalog.models import ProductUpdate
from storefront.recommendations.cache import clear_cache

client = TestClient(app)


def test_related_products_for_bridal_lehenga():
    reset_catalog()
    clear_cache()
    resp = client.get("/products/p1/related")
    assert resp.status_code == 200
    body = resp.json()
    assert body["product_id"] == "p1"
    assert [r["product"]["id"] for r in body["related"]] == ["p3", "p2", "p4", "p11"]
    assert [r["score"] for r in body["related"]] == [110, 90, 40, 25]
    assert all(r["source"] == "scored" for r in body["related"])


def test_related_respects_limit():
    reset_catalog()
    clear_cache()
    body = client.get("/products/p8/related", params={"limit": 2}).json()
    assert len(body["related"]) == 2
    assert all(r["product"]["id"] != "p8" for r in body["related"])


def test_related_limit_zero_is_empty():
    clear_cache()
    body = client.get("/products/p1/related", params={"limit": 0}).json()
    assert body["related"] == []


def test_related_never_includes_inactive_products():
    reset_catalog()
    clear_cache()
    body = client.get("/products/p11/related", params={"limit": 20}).json()
    assert "p13" not in {r["product"]["id"] for r in body["related"]}


def test_related_scores_are_descending():
    clear_cache()
    body = client.get("/products/p6/related", params={"limit": 10}).json()
    scores = [r["score"] for r in body["related"] if r["source"] == "scored"]
    assert scores == sorted(scores, reverse=True)


def test_related_unknown_product():
    clear_cache()
    assert client.get("/products/nope/related").status_code == 404


def test_related_validation_rejects_bad_limit():
    assert client.get("/products/p1/related", params={"limit": 50}).status_code == 422
    assert client.get("/products/p1/related", params={"limit": -1}).status_code == 422


def test_related_for_inactive_product_is_404():
    reset_catalog()
    clear_cache()
    assert client.get("/products/p1/related").status_code == 200
    # deactivated behind the cache's back, so the cached list must not leak
    update_product("p1", ProductUpdate(is_active=False))
    assert client.get("/products/p1").status_code == 404
    assert client.get("/products/p1/related").status_code == 404
    reset_catalog()
    clear_cache()
