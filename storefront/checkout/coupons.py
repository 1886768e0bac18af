from __future__ import annotations

import logging

from .models import AppliedCoupon, Coupon, CouponCreate, CouponUpdate, DiscountType

logger = logging.getLogger(__name__)

_coupons: dict[str, Coupon] = {}


class CouponError(Exception):
    """A coupon could not be applied or saved; ``str(exc)`` is user-facing."""


class CouponNotFound(CouponError):
    def __init__(self, code: str) -> None:
        super().__init__("Coupon not found")
        self.code = code


class CouponInactive(CouponError):
    def __init__(self, code: str) -> None:
        super().__init__("Coupon is no longer active")
        self.code = code


class MinimumOrderNotMet(CouponError):
    def __init__(self, code: str, min_order_amount: float) -> None:
        super().__init__(f"Minimum order amount of ₹{min_order_amount:g} not met")
        self.code = code
        self.min_order_amount = min_order_amount


def normalize_code(code: str) -> str:
    return code.strip().upper()


def _seed_coupons() -> None:
    """Pre-seed demo coupons on import."""
    for coupon in (
        Coupon(
            code="WELCOME100",
            discount_type=DiscountType.fixed,
            discount_value=100,
            description="₹100 off your first order",
        ),
        Coupon(
            code="FESTIVE10",
            discount_type=DiscountType.percentage,
            discount_value=10,
            min_order_amount=1999,
            description="10% off festive orders above ₹1999",
        ),
        Coupon(
            code="SUMMER50",
            discount_type=DiscountType.fixed,
            discount_value=50,
            is_active=False,
            description="Summer sale (ended)",
        ),
    ):
        _coupons[coupon.code] = coupon


def compute_discount(coupon: Coupon, order_amount: float) -> float:
    if coupon.discount_type == DiscountType.percentage:
        discount = round(order_amount * coupon.discount_value / 100, 2)
    else:
        discount = coupon.discount_value
    return min(discount, order_amount)


def validate_coupon(code: str, order_amount: float) -> AppliedCoupon:
    """Check *code* against the store for an order of *order_amount*.

    Raises a ``CouponError`` subclass naming the first failed rule.
    """
    coupon = _coupons.get(normalize_code(code))
    if coupon is None:
        raise CouponNotFound(code)
    if not coupon.is_active:
        raise CouponInactive(coupon.code)
    if order_amount < coupon.min_order_amount:
        raise MinimumOrderNotMet(coupon.code, coupon.min_order_amount)

    return AppliedCoupon(
        code=coupon.code,
        discount=compute_discount(coupon, order_amount),
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
    )


# ── Admin management ─────────────────────────────────────────────────────


def list_coupons() -> list[Coupon]:
    return sorted(_coupons.values(), key=lambda c: c.code)


def get_coupon(code: str) -> Coupon:
    coupon = _coupons.get(normalize_code(code))
    if coupon is None:
        raise CouponNotFound(code)
    return coupon


def create_coupon(body: CouponCreate) -> Coupon:
    code = normalize_code(body.code)
    if code in _coupons:
        raise CouponError("Coupon code already exists")
    if body.discount_type == DiscountType.percentage and body.discount_value > 100:
        raise CouponError("Percentage discount cannot exceed 100")
    coupon = Coupon(**{**body.model_dump(), "code": code})
    _coupons[code] = coupon
    logger.info("Created coupon %s", code)
    return coupon


def update_coupon(code: str, body: CouponUpdate) -> Coupon:
    current = get_coupon(code)
    updated = current.model_copy(update=body.model_dump(exclude_none=True))
    if updated.discount_type == DiscountType.percentage and updated.discount_value > 100:
        raise CouponError("Percentage discount cannot exceed 100")
    _coupons[updated.code] = updated
    return updated


def delete_coupon(code: str) -> None:
    coupon = get_coupon(code)
    del _coupons[coupon.code]
    logger.info("Deleted coupon %s", coupon.code)


def reset_coupons() -> None:
    _coupons.clear()
    _seed_coupons()


_seed_coupons()
