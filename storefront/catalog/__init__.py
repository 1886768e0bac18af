"""
Product catalog.

Responsibilities:
- Load the canonical product table into memory.
- Serve filtered, searched and sorted product listings.
- Apply admin create / update / delete operations.
- Project products onto the lightweight records used for recommendations.
"""
