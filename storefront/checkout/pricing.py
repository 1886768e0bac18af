from __future__ import annotations

from typing import Iterable

from .config import DEFAULT_PRICING_CONFIG, PricingConfig
from .models import CartLine, OrderTotals


def compute_subtotal(lines: Iterable[CartLine]) -> float:
    return round(sum(line.unit_price * line.quantity for line in lines), 2)


def compute_shipping(
    subtotal: float, config: PricingConfig = DEFAULT_PRICING_CONFIG
) -> float:
    """Flat fee below the free-shipping threshold, free at or above it."""
    if subtotal >= config.free_shipping_threshold:
        return 0.0
    return config.flat_shipping_fee


def compute_totals(
    lines: Iterable[CartLine],
    discount: float = 0.0,
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
) -> OrderTotals:
    """
    Price a cart.

    *discount* is the monetary amount already reconciled (and capped at the
    subtotal) by coupon validation. Negative discounts count as zero and the
    total is floored at zero.
    """
    subtotal = compute_subtotal(lines)
    shipping = compute_shipping(subtotal, config)
    discount = max(discount, 0.0)
    total = max(0.0, round(subtotal + shipping - discount, 2))
    return OrderTotals(
        subtotal=subtotal,
        shipping=shipping,
        discount=discount,
        total=total,
    )
