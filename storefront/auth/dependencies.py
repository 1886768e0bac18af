from __future__ import annotations

from fastapi import HTTPException, Request

from .users import UserNotFound, get_user


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in or the account was disabled since."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        account = get_user(user["id"])
    except UserNotFound:
        request.session.pop("user", None)
        raise HTTPException(status_code=401, detail="Not authenticated") from None
    if not account.is_active:
        request.session.pop("user", None)
        raise HTTPException(status_code=401, detail="Account is disabled")
    return {**user, "role": account.role}


def require_admin(request: Request) -> dict:
    """Raise 401 if not logged in, 403 if not admin."""
    user = require_user(request)
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
