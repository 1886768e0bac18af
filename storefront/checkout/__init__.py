"""
Checkout pricing.

Responsibilities:
- Keep the shopping cart and the applied coupon in the user session.
- Validate coupon codes against the coupon store.
- Compute subtotal, shipping, discount and total for a cart.
"""
