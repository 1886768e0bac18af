from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from ..checkout.models import CartLine, OrderTotals


class OrderStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"


class PaymentMethod(str, Enum):
    card = "card"
    upi = "upi"
    netbanking = "netbanking"
    cod = "cod"


class ShippingAddress(BaseModel):
    name: str = Field(..., min_length=1)
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = ""
    zip_code: str = Field(..., min_length=4, max_length=10)
    country: str = "India"
    phone: str = ""


class PaymentDetails(BaseModel):
    transaction_id: str | None = None


class PlaceOrderRequest(BaseModel):
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    payment_details: PaymentDetails | None = None
    notes: str | None = Field(default=None, max_length=500)


class Order(BaseModel):
    id: str
    tracking_id: str
    user_id: str
    items: list[CartLine]
    totals: OrderTotals
    coupon_code: str | None = None
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    payment_details: PaymentDetails | None = None
    notes: str | None = None
    status: OrderStatus = OrderStatus.confirmed
    created_at: float
    updated_at: float


class OrderResponse(BaseModel):
    order: Order
    message: str | None = None


class OrderListResponse(BaseModel):
    orders: list[Order]
    total: int


class StatusUpdateRequest(BaseModel):
    status: str
