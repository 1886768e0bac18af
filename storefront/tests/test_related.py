from __future__ import annotations

from unittest.mock import patch

from storefront.catalog.models import CatalogItem
from storefront.recommendations.related import get_related_products, score_candidate


def _item(item_id: str, category: str, price: float, **kwargs) -> CatalogItem:
    return CatalogItem(id=item_id, category=category, price=price, **kwargs)


REFERENCE = _item("ref", "Lehengas", 5000, subcategory="Bridal")


# ── Scoring ──────────────────────────────────────────────────────────────


def test_same_category_and_price_band():
    candidate = _item("a", "Lehengas", 5200)
    assert score_candidate(REFERENCE, candidate) == 70


def test_price_band_only():
    candidate = _item("b", "Sarees", 5100)
    assert score_candidate(REFERENCE, candidate) == 20


def test_price_band_bounds_are_inclusive():
    assert score_candidate(REFERENCE, _item("lo", "Tops", 4000)) == 20
    assert score_candidate(REFERENCE, _item("hi", "Tops", 6000)) == 20
    assert score_candidate(REFERENCE, _item("out", "Tops", 6001)) == 0


def test_subcategory_needs_a_value_on_both_sides():
    reference = _item("r", "Kurtis", 1000)
    candidate = _item("c", "Sarees", 9000, subcategory="")
    assert score_candidate(reference, candidate) == 0


def test_season_and_style_signals_stack():
    reference = _item("r", "Dresses", 2000, is_summer=True, is_winter=True, is_western=True)
    candidate = _item("c", "Tops", 9000, is_summer=True, is_winter=True, is_western=True)
    assert score_candidate(reference, candidate) == 10 + 10 + 15


def test_bonuses_depend_on_candidate_only():
    reference = _item("r", "Tops", 700, is_bestseller=True, is_new=True)
    plain = _item("c", "Jackets", 5000)
    flagged = _item("d", "Jackets", 5000, is_bestseller=True, is_new=True)
    assert score_candidate(reference, plain) == 0
    assert score_candidate(reference, flagged) == 10


# ── Ranking ──────────────────────────────────────────────────────────────


def test_orders_by_score():
    a = _item("a", "Lehengas", 5200)
    b = _item("b", "Sarees", 5100)
    result = get_related_products(REFERENCE, [b, a])
    assert [r.item.id for r in result] == ["a", "b"]
    assert result[0].score >= 70
    assert result[1].score == 20


def test_subcategory_match_outranks_category_only():
    category_only = _item("cat", "Lehengas", 5000, is_bestseller=True, is_new=True)
    with_sub = _item("sub", "Lehengas", 20000, subcategory="Bridal")
    result = get_related_products(REFERENCE, [category_only, with_sub])
    assert [r.item.id for r in result] == ["sub", "cat"]
    assert result[0].score == 90
    assert result[1].score == 80


def test_equal_scores_keep_catalog_order():
    pool = [_item(f"s{i}", "Sarees", 5000 + i) for i in range(6)]
    result = get_related_products(REFERENCE, pool, limit=6)
    assert [r.item.id for r in result] == [f"s{i}" for i in range(6)]
    assert {r.score for r in result} == {20}


def test_excludes_reference_and_respects_limit():
    pool = [REFERENCE] + [_item(f"l{i}", "Lehengas", 100) for i in range(10)]
    result = get_related_products(REFERENCE, pool, limit=4)
    assert len(result) == 4
    assert all(r.item.id != REFERENCE.id for r in result)


def test_zero_scores_are_dropped():
    unrelated = _item("x", "Jackets", 99999)
    assert get_related_products(REFERENCE, [unrelated]) == []


def test_sparse_pool_returns_partial_result():
    pool = [_item("a", "Lehengas", 100), _item("x", "Jackets", 99999)]
    result = get_related_products(REFERENCE, pool, limit=4)
    assert [r.item.id for r in result] == ["a"]


def test_empty_pool_and_non_positive_limit():
    pool = [_item("a", "Lehengas", 5000)]
    assert get_related_products(REFERENCE, []) == []
    assert get_related_products(REFERENCE, pool, limit=0) == []
    assert get_related_products(REFERENCE, pool, limit=-3) == []


def test_reference_need_not_be_in_pool():
    pool = [_item("a", "Lehengas", 5000)]
    result = get_related_products(REFERENCE, pool)
    assert [r.item.id for r in result] == ["a"]


def test_results_are_deterministic():
    pool = [_item(f"i{i}", "Lehengas" if i % 2 else "Sarees", 4500 + i * 50) for i in range(12)]
    first = [r.item.id for r in get_related_products(REFERENCE, pool)]
    second = [r.item.id for r in get_related_products(REFERENCE, pool)]
    assert first == second


@patch("storefront.recommendations.related.score_candidate", return_value=0)
def test_backfill_uses_category_or_bestseller_in_catalog_order(mock_score):
    pool = [
        _item("jacket", "Jackets", 3000),
        _item("best", "Tops", 700, is_bestseller=True),
        REFERENCE,
        _item("lehenga", "Lehengas", 9000),
        _item("other", "Lehengas", 12000),
    ]
    result = get_related_products(REFERENCE, pool, limit=2)
    assert [r.item.id for r in result] == ["best", "lehenga"]
    assert all(r.source == "fallback" and r.score is None for r in result)
