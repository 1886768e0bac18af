"""
Related-products recommendations.

Responsibilities:
- Score catalog items against the product being viewed.
- Rank candidates with a stable, deterministic ordering.
- Backfill sparse results from the same category or bestsellers.
- Cache per-product results between catalog changes.
"""
