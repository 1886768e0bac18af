"""
Session-backed cart.

The cart lives in the signed session cookie as a list of plain dicts under
``"cart"``; the applied coupon is kept as its code under ``"coupon"`` and
re-validated whenever the cart is priced, because percentage discounts and
minimum-order rules depend on the current subtotal.
"""

from __future__ import annotations

import logging
from typing import Any, MutableMapping

from ..catalog.models import Product
from .coupons import CouponError, validate_coupon
from .models import MAX_LINE_QUANTITY, AppliedCoupon, CartLine, CartResponse
from .pricing import compute_subtotal, compute_totals

logger = logging.getLogger(__name__)

Session = MutableMapping[str, Any]

_CART_KEY = "cart"
_COUPON_KEY = "coupon"


class CartError(Exception):
    """The requested cart change cannot be made."""


def get_lines(session: Session) -> list[CartLine]:
    return [CartLine(**raw) for raw in session.get(_CART_KEY, [])]


def _save_lines(session: Session, lines: list[CartLine]) -> None:
    session[_CART_KEY] = [line.model_dump() for line in lines]


def add_line(
    session: Session,
    product: Product,
    quantity: int = 1,
    size: str | None = None,
    color: str | None = None,
) -> list[CartLine]:
    """Add *product* to the cart, merging with a line for the same options.

    The unit price is snapshotted from *product* when the line is created.
    """
    if not product.is_active:
        raise CartError(f"{product.name} is not available")
    if size is not None and product.sizes and size not in product.sizes:
        raise CartError(f"Size {size} is not available for {product.name}")
    if color is not None and product.colors and color not in product.colors:
        raise CartError(f"Color {color} is not available for {product.name}")

    lines = get_lines(session)
    for line in lines:
        if (line.product_id, line.size, line.color) == (product.id, size, color):
            if line.quantity + quantity > MAX_LINE_QUANTITY:
                raise CartError(
                    f"At most {MAX_LINE_QUANTITY} of {product.name} can be added to the cart"
                )
            line.quantity += quantity
            break
    else:
        lines.append(
            CartLine(
                product_id=product.id,
                name=product.name,
                quantity=quantity,
                size=size,
                color=color,
                unit_price=product.price,
                image=product.image,
            )
        )
    _save_lines(session, lines)
    return lines


def update_quantity(session: Session, index: int, quantity: int) -> list[CartLine]:
    """Set the quantity of the line at *index*; zero removes the line."""
    if quantity == 0:
        return remove_line(session, index)
    lines = get_lines(session)
    if not 0 <= index < len(lines):
        raise CartError(f"Cart line {index} does not exist")
    lines[index].quantity = quantity
    _save_lines(session, lines)
    return lines


def remove_line(session: Session, index: int) -> list[CartLine]:
    lines = get_lines(session)
    if not 0 <= index < len(lines):
        raise CartError(f"Cart line {index} does not exist")
    del lines[index]
    _save_lines(session, lines)
    return lines


def clear_cart(session: Session) -> None:
    session.pop(_CART_KEY, None)
    session.pop(_COUPON_KEY, None)


def apply_coupon(session: Session, code: str) -> AppliedCoupon:
    """Validate *code* against the current cart and make it the applied coupon.

    Any previously applied coupon is replaced. Rejections propagate as
    ``CouponError`` and leave the session untouched.
    """
    applied = validate_coupon(code, compute_subtotal(get_lines(session)))
    session[_COUPON_KEY] = applied.code
    return applied


def remove_coupon(session: Session) -> None:
    session.pop(_COUPON_KEY, None)


def current_coupon(session: Session) -> tuple[AppliedCoupon | None, str | None]:
    """Re-validate the applied coupon against the cart as it is now.

    Returns ``(coupon, None)`` while it still applies, ``(None, reason)`` after
    dropping a coupon that no longer does, and ``(None, None)`` when no coupon
    is applied.
    """
    code = session.get(_COUPON_KEY)
    if not code:
        return None, None
    try:
        return validate_coupon(code, compute_subtotal(get_lines(session))), None
    except CouponError as exc:
        logger.warning("Dropping coupon %s from cart: %s", code, exc)
        remove_coupon(session)
        return None, str(exc)


def build_quote(session: Session) -> CartResponse:
    lines = get_lines(session)
    coupon, message = current_coupon(session)
    totals = compute_totals(lines, coupon.discount if coupon else 0.0)
    return CartResponse(
        items=lines,
        item_count=sum(line.quantity for line in lines),
        coupon=coupon,
        coupon_message=message,
        totals=totals,
    )
