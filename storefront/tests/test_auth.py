from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from storefront.app import app

client = TestClient(app)


def _login_user(c):
    c.post("/auth/login", json={"email": "user@vasstra.in", "password": "user123"})


def _login_admin(c):
    c.post("/auth/login", json={"email": "admin@vasstra.in", "password": "admin123"})


def _unique_email() -> str:
    return f"member-{uuid.uuid4().hex[:8]}@example.com"


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_success_user():
    resp = client.post("/auth/login", json={"email": "user@vasstra.in", "password": "user123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["user"]["email"] == "user@vasstra.in"
    assert body["user"]["role"] == "user"


def test_login_email_is_case_insensitive():
    resp = client.post("/auth/login", json={"email": "Admin@Vasstra.in", "password": "admin123"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "admin"


def test_login_wrong_password():
    resp = client.post("/auth/login", json={"email": "user@vasstra.in", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user():
    resp = client.post("/auth/login", json={"email": "nobody@vasstra.in", "password": "x"})
    assert resp.status_code == 401


def test_auth_me_when_logged_in():
    _login_user(client)
    resp = client.get("/auth/me")
    assert resp.status_code == 200
    assert resp.json()["email"] == "user@vasstra.in"


def test_auth_me_not_logged_in():
    c = TestClient(app)  # fresh client, no session
    resp = c.get("/auth/me")
    assert resp.status_code == 401


def test_logout():
    _login_user(client)
    resp = client.post("/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["status"] == "logged_out"
    # Session should be cleared
    resp = client.get("/auth/me")
    assert resp.status_code == 401


# ── Registration ─────────────────────────────────────────────────────────


def test_register_logs_in():
    c = TestClient(app)
    email = _unique_email()
    resp = c.post("/auth/register", json={"name": "Meera", "email": email, "password": "secret1"})
    assert resp.status_code == 201
    assert resp.json()["user"]["role"] == "user"
    assert c.get("/auth/me").json()["email"] == email


def test_register_duplicate_email():
    c = TestClient(app)
    resp = c.post("/auth/register", json={
        "name": "Someone", "email": "USER@vasstra.in", "password": "secret1",
    })
    assert resp.status_code == 409


def test_register_validation():
    c = TestClient(app)
    short = c.post("/auth/register", json={"name": "A", "email": _unique_email(), "password": "123"})
    assert short.status_code == 422
    bad_email = c.post("/auth/register", json={"name": "A", "email": "not-an-email", "password": "secret1"})
    assert bad_email.status_code == 422


# ── Route protection ─────────────────────────────────────────────────────


def test_my_orders_requires_login():
    c = TestClient(app)
    assert c.get("/orders/my-orders").status_code == 401


def test_stats_requires_admin():
    c = TestClient(app)
    _login_user(c)
    assert c.get("/admin/stats").status_code == 403


def test_stats_allowed_for_admin():
    c = TestClient(app)
    _login_admin(c)
    assert c.get("/admin/stats").status_code == 200


def test_cache_stats_requires_admin():
    c = TestClient(app)
    _login_user(c)
    assert c.get("/admin/cache/stats").status_code == 403


# ── Public endpoints stay public ─────────────────────────────────────────


def test_catalog_is_public():
    c = TestClient(app)
    assert c.get("/health").status_code == 200
    assert c.get("/metadata").status_code == 200
    assert c.get("/products").status_code == 200
    assert c.get("/cart").status_code == 200


# ── Admin user management ────────────────────────────────────────────────


def test_admin_lists_and_searches_users():
    c = TestClient(app)
    _login_admin(c)
    body = c.get("/admin/users", params={"search": "vasstra.in"}).json()
    emails = {u["email"] for u in body["users"]}
    assert {"user@vasstra.in", "admin@vasstra.in"} <= emails
    assert all("password_hash" not in u for u in body["users"])


def test_deactivated_user_is_locked_out():
    member = TestClient(app)
    email = _unique_email()
    user = member.post("/auth/register", json={
        "name": "Temp", "email": email, "password": "secret1",
    }).json()["user"]

    admin = TestClient(app)
    _login_admin(admin)
    resp = admin.put(f"/admin/users/{user['id']}", json={"is_active": False})
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    assert member.get("/auth/me").status_code == 401
    assert member.post("/auth/login", json={"email": email, "password": "secret1"}).status_code == 401


def test_promoted_user_gains_admin_access():
    member = TestClient(app)
    user = member.post("/auth/register", json={
        "name": "Promo", "email": _unique_email(), "password": "secret1",
    }).json()["user"]
    assert member.get("/admin/stats").status_code == 403

    admin = TestClient(app)
    _login_admin(admin)
    admin.put(f"/admin/users/{user['id']}", json={"role": "admin"})
    assert member.get("/admin/stats").status_code == 200


def test_admin_deletes_user_but_not_self():
    member = TestClient(app)
    user = member.post("/auth/register", json={
        "name": "Gone", "email": _unique_email(), "password": "secret1",
    }).json()["user"]

    admin = TestClient(app)
    me = admin.post("/auth/login", json={"email": "admin@vasstra.in", "password": "admin123"}).json()["user"]
    assert admin.delete(f"/admin/users/{me['id']}").status_code == 400
    assert admin.delete(f"/admin/users/{user['id']}").status_code == 200
    assert admin.delete(f"/admin/users/{user['id']}").status_code == 404
    assert member.get("/auth/me").status_code == 401
