from __future__ import annotations

import time
import uuid
from typing import Any

import bcrypt

from .models import RegisterRequest, UserOut, UserUpdate

_users: dict[str, dict[str, Any]] = {}


class UserError(Exception):
    """A user could not be registered or changed; ``str(exc)`` is user-facing."""


class UserNotFound(UserError):
    pass


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _public(record: dict[str, Any]) -> UserOut:
    return UserOut(**{k: v for k, v in record.items() if k != "password_hash"})


def _add_user(name: str, email: str, password: str, role: str, phone: str = "") -> dict:
    record = {
        "id": uuid.uuid4().hex[:12],
        "name": name.strip(),
        "email": _normalize_email(email),
        "phone": phone,
        "role": role,
        "is_active": True,
        "created_at": time.time(),
        "password_hash": _hash_password(password),
    }
    _users[record["email"]] = record
    return record


def _seed_users() -> None:
    """Pre-seed demo users on import."""
    _add_user("Demo Shopper", "user@vasstra.in", "user123", "user")
    _add_user("Store Admin", "admin@vasstra.in", "admin123", "admin")


def _find_by_id(user_id: str) -> dict[str, Any]:
    for record in _users.values():
        if record["id"] == user_id:
            return record
    raise UserNotFound("User not found")


def register(body: RegisterRequest) -> UserOut:
    email = _normalize_email(body.email)
    if email in _users:
        raise UserError("An account with this email already exists")
    return _public(_add_user(body.name, email, body.password, "user", body.phone))


def authenticate(email: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{id, email, name, role}`` or ``None``."""
    record = _users.get(_normalize_email(email))
    if record and record["is_active"] and _verify_password(password, record["password_hash"]):
        return {
            "id": record["id"],
            "email": record["email"],
            "name": record["name"],
            "role": record["role"],
        }
    return None


def get_user(user_id: str) -> UserOut:
    return _public(_find_by_id(user_id))


def list_users(search: str | None = None) -> list[UserOut]:
    records = list(_users.values())
    if search:
        needle = search.strip().lower()
        records = [
            r for r in records
            if needle in r["name"].lower() or needle in r["email"]
        ]
    return [_public(r) for r in sorted(records, key=lambda r: r["created_at"], reverse=True)]


def update_user(user_id: str, body: UserUpdate) -> UserOut:
    record = _find_by_id(user_id)
    record.update(body.model_dump(exclude_none=True))
    return _public(record)


def delete_user(user_id: str) -> None:
    record = _find_by_id(user_id)
    del _users[record["email"]]


_seed_users()
