from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

MAX_LINE_QUANTITY = 20


class CartLine(BaseModel):
    product_id: str
    name: str
    quantity: int = Field(..., ge=1)
    size: str | None = None
    color: str | None = None
    unit_price: float = Field(..., ge=0)
    image: str | None = None

class OrderTotals(BaseModel):
    subtotal: float
    shipping: float
    discount: float
    total: float


class DiscountType(str, Enum):
    fixed = "fixed"
    percentage = "percentage"


class Coupon(BaseModel):
    code: str
    discount_type: DiscountType
    discount_value: float = Field(..., gt=0)
    min_order_amount: float = Field(default=0.0, ge=0)
    is_active: bool = True
    description: str = ""


class CouponCreate(BaseModel):
    code: str = Field(..., min_length=3, max_length=32)
    discount_type: DiscountType
    discount_value: float = Field(..., gt=0)
    min_order_amount: float = Field(default=0.0, ge=0)
    is_active: bool = True
    description: str = ""


class CouponUpdate(BaseModel):
    discount_type: DiscountType | None = None
    discount_value: float | None = Field(default=None, gt=0)
    min_order_amount: float | None = Field(default=None, ge=0)
    is_active: bool | None = None
    description: str | None = None


class AppliedCoupon(BaseModel):
    """A coupon that passed validation, with its discount already reconciled."""

    code: str
    discount: float
    discount_type: DiscountType
    discount_value: float


# ── Cart API payloads ────────────────────────────────────────────────────


class AddToCartRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1, le=MAX_LINE_QUANTITY)
    size: str | None = None
    color: str | None = None


class UpdateCartLineRequest(BaseModel):
    quantity: int = Field(..., ge=0, le=MAX_LINE_QUANTITY)


class ApplyCouponRequest(BaseModel):
    code: str = Field(..., min_length=1)


class CartResponse(BaseModel):
    items: list[CartLine]
    item_count: int
    coupon: AppliedCoupon | None = None
    coupon_message: str | None = None
    totals: OrderTotals
