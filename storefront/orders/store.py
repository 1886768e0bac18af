from __future__ import annotations

import logging
import time
import uuid

from ..checkout.models import CartLine, OrderTotals
from .models import Order, OrderStatus, PaymentMethod, PlaceOrderRequest

logger = logging.getLogger(__name__)

_orders: dict[str, Order] = {}

_TRANSACTION_REQUIRED = {
    PaymentMethod.cod: "COD",
    PaymentMethod.upi: "UPI",
}


class OrderError(Exception):
    """An order could not be placed or changed; ``str(exc)`` is user-facing."""


class OrderNotFound(OrderError):
    pass


def _new_tracking_id() -> str:
    return f"VAS{uuid.uuid4().hex[:10].upper()}"


def place_order(
    user_id: str,
    lines: list[CartLine],
    totals: OrderTotals,
    body: PlaceOrderRequest,
    coupon_code: str | None = None,
) -> Order:
    """Record an order for an already-priced cart."""
    if not lines:
        raise OrderError("Order must contain at least one item")
    if totals.total <= 0:
        raise OrderError("Invalid total amount")

    label = _TRANSACTION_REQUIRED.get(body.payment_method)
    if label:
        details = body.payment_details
        if details is None or not (details.transaction_id or "").strip():
            raise OrderError(f"Transaction ID is required for {label} payment")

    now = time.time()
    order = Order(
        id=uuid.uuid4().hex[:12],
        tracking_id=_new_tracking_id(),
        user_id=user_id,
        items=list(lines),
        totals=totals,
        coupon_code=coupon_code,
        shipping_address=body.shipping_address,
        payment_method=body.payment_method,
        payment_details=body.payment_details,
        notes=body.notes,
        status=OrderStatus.confirmed,
        created_at=now,
        updated_at=now,
    )
    _orders[order.id] = order
    logger.info(
        "Order %s placed by %s: %d lines, total %.2f",
        order.id,
        user_id,
        len(lines),
        totals.total,
    )
    return order


def get_order(order_id: str) -> Order:
    order = _orders.get(order_id)
    if order is None:
        raise OrderNotFound("Order not found")
    return order


def get_by_tracking_id(tracking_id: str) -> Order:
    for order in _orders.values():
        if order.tracking_id == tracking_id:
            return order
    raise OrderNotFound("Order not found with this tracking ID")


def list_orders_for_user(user_id: str) -> list[Order]:
    """Orders placed by *user_id*, newest first."""
    mine = [o for o in _orders.values() if o.user_id == user_id]
    return sorted(mine, key=lambda o: o.created_at, reverse=True)


def list_orders() -> list[Order]:
    return sorted(_orders.values(), key=lambda o: o.created_at, reverse=True)


def update_status(order_id: str, status: str) -> Order:
    try:
        new_status = OrderStatus(status)
    except ValueError:
        raise OrderError("Invalid status") from None
    order = get_order(order_id)
    updated = order.model_copy(update={"status": new_status, "updated_at": time.time()})
    _orders[order_id] = updated
    logger.info("Order %s moved %s -> %s", order_id, order.status.value, new_status.value)
    return updated


def delete_order(order_id: str) -> None:
    get_order(order_id)
    del _orders[order_id]


def clear_orders() -> None:
    _orders.clear()
