"""
Payment settings.

Responsibilities:
- Hold the store-wide payment configuration edited from the back office.
- Decide which payment methods checkout may offer.
"""
