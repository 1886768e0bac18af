"""
Related-products scoring.

Every candidate gets an additive relevance score against the product being
viewed:

=====================  =======================================  ======
Signal                 Condition                                Weight
=====================  =======================================  ======
Category               same category                            +50
Subcategory            both set and equal                       +40
Price                  within ±20 % of the viewed price         +20
Season                 both summer / both winter                +10 each
Style                  both ethnic / both western               +15 each
Bestseller             candidate is a bestseller                +5
New arrival            candidate is new                         +5
=====================  =======================================  ======

Zero-score candidates are dropped, the rest are ranked by descending score
with ties kept in catalog order, and a short list is topped up from the same
category or the bestsellers.
"""

from __future__ import annotations

from typing import Iterable

from ..catalog.models import CatalogItem
from .models import ScoredItem

DEFAULT_LIMIT = 4
PRICE_TOLERANCE = 0.2

CATEGORY_WEIGHT = 50
SUBCATEGORY_WEIGHT = 40
PRICE_WEIGHT = 20
SEASON_WEIGHT = 10
STYLE_WEIGHT = 15
BESTSELLER_BONUS = 5
NEW_BONUS = 5


def _within_price_band(reference_price: float, price: float) -> bool:
    low = reference_price * (1 - PRICE_TOLERANCE)
    high = reference_price * (1 + PRICE_TOLERANCE)
    return low <= price <= high


def score_candidate(reference: CatalogItem, candidate: CatalogItem) -> int:
    """Return the relevance of *candidate* to *reference*."""
    score = 0

    if candidate.category == reference.category:
        score += CATEGORY_WEIGHT
    if candidate.subcategory and candidate.subcategory == reference.subcategory:
        score += SUBCATEGORY_WEIGHT
    if _within_price_band(reference.price, candidate.price):
        score += PRICE_WEIGHT

    if reference.is_summer and candidate.is_summer:
        score += SEASON_WEIGHT
    if reference.is_winter and candidate.is_winter:
        score += SEASON_WEIGHT

    if reference.is_ethnic and candidate.is_ethnic:
        score += STYLE_WEIGHT
    if reference.is_western and candidate.is_western:
        score += STYLE_WEIGHT

    if candidate.is_bestseller:
        score += BESTSELLER_BONUS
    if candidate.is_new:
        score += NEW_BONUS

    return score


def get_related_products(
    reference: CatalogItem,
    candidates: Iterable[CatalogItem],
    limit: int = DEFAULT_LIMIT,
) -> list[ScoredItem]:
    """Rank *candidates* by relevance to *reference*, most relevant first.

    Returns at most *limit* entries and never the reference itself.
    """
    if limit <= 0:
        return []

    pool = [c for c in candidates if c.id != reference.id]

    scored: list[ScoredItem] = []
    for c in pool:
        score = score_candidate(reference, c)
        if score > 0:
            scored.append(ScoredItem(item=c, score=score))
    # sorted() is stable, so equal scores keep catalog order
    ranked = sorted(scored, key=lambda entry: entry.score, reverse=True)[:limit]

    if len(ranked) < limit:
        taken = {reference.id} | {entry.item.id for entry in ranked}
        for c in pool:
            if len(ranked) >= limit:
                break
            if c.id in taken:
                continue
            if c.category == reference.category or c.is_bestseller:
                ranked.append(ScoredItem(item=c, score=None, source="fallback"))
                taken.add(c.id)

    return ranked
