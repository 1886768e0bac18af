"""
Orders.

Responsibilities:
- Turn a priced session cart into a placed order.
- Keep order history per user and a public tracking lookup.
- Let admins move orders through their fulfilment statuses.
"""
