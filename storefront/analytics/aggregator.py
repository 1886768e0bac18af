from __future__ import annotations

from collections import Counter
from typing import Any

from ..auth.models import UserOut
from ..orders.models import Order, OrderStatus


def compute_stats(
    events: list[dict[str, Any]],
    orders: list[Order],
    users: list[UserOut],
) -> dict[str, Any]:
    # Users
    active_users = sum(1 for u in users if u.is_active)
    admin_users = sum(1 for u in users if u.role == "admin")

    # Orders and revenue
    status_counter: Counter[str] = Counter(o.status.value for o in orders)
    orders_by_status = {s.value: status_counter.get(s.value, 0) for s in OrderStatus}
    billable = [o for o in orders if o.status != OrderStatus.cancelled]
    total_revenue = round(sum(o.totals.total for o in billable), 2)
    avg_order_value = round(total_revenue / len(billable), 2) if billable else 0.0

    # Best sellers by units
    units: Counter[str] = Counter()
    names: dict[str, str] = {}
    for order in billable:
        for line in order.items:
            units[line.product_id] += line.quantity
            names[line.product_id] = line.name
    top_products = [
        {"product_id": pid, "name": names[pid], "quantity": qty}
        for pid, qty in units.most_common(5)
    ]

    # Coupons
    applied = [e for e in events if e["type"] == "coupon_applied"]
    rejected = [e for e in events if e["type"] == "coupon_rejected"]
    code_counter: Counter[str] = Counter(e.get("code", "") for e in applied)
    redeemed = sum(1 for o in billable if o.coupon_code)
    total_discount = round(sum(o.totals.discount for o in billable), 2)

    # Recommendations
    related_views = sum(1 for e in events if e["type"] == "related_viewed")

    return {
        "total_users": len(users),
        "active_users": active_users,
        "admin_users": admin_users,
        "total_orders": len(orders),
        "total_revenue": total_revenue,
        "avg_order_value": avg_order_value,
        "orders_by_status": orders_by_status,
        "top_products": top_products,
        "coupon_usage": {
            "applied": len(applied),
            "rejected": len(rejected),
            "redeemed_in_orders": redeemed,
            "total_discount": total_discount,
            "top_codes": [{"code": c, "count": n} for c, n in code_counter.most_common(5)],
        },
        "related_views": related_views,
    }
