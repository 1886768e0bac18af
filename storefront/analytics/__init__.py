"""
Store analytics.

Responsibilities:
- Record storefront events (orders, coupon attempts, recommendation views).
- Aggregate users, orders and events into the admin dashboard figures.
"""
