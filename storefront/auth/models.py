from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=6)
    phone: str = ""


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str = ""
    role: Literal["user", "admin"]
    is_active: bool
    created_at: float


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    phone: str | None = None
    role: Literal["user", "admin"] | None = None
    is_active: bool | None = None


class UserListResponse(BaseModel):
    users: list[UserOut]
    total: int
