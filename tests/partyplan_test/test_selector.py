"""Unit tests for CategorySelector."""

import pytest

from partyplan.matching.config import EngineConfig
from partyplan.matching.models.supplier import (
    DateEntry,
    SupplierCategory,
    UnavailableDates,
)
from partyplan.matching.selector import CategorySelector
from tests.partyplan_test.conftest import PARTY_DAY, make_supplier

BLOCKED = [UnavailableDates(entries=[DateEntry(day=PARTY_DAY)])]


def _select(selector, candidates, budget=200.0, theme="princess", location="W3 7QD"):
    return selector.select(
        candidates,
        "entertainment",
        theme,
        "afternoon",
        PARTY_DAY,
        location,
        budget,
    )


class TestEmptyAndBudget:
    def test_no_candidates(self):
        selection = _select(CategorySelector(), [])
        assert selection.result is None
        assert selection.reason == "no-suppliers-found"

    def test_nothing_affordable(self):
        pricey = make_supplier(price_from=261)
        selection = _select(CategorySelector(), [pricey], budget=200)
        assert selection.result is None
        assert selection.reason == "no-suppliers-in-budget"

    def test_tolerance_allows_thirty_percent_over(self):
        stretch = make_supplier(price_from=260)
        selection = _select(CategorySelector(), [stretch], budget=200)
        assert selection.supplier == stretch

    def test_custom_tolerance(self):
        strict = CategorySelector(EngineConfig(budget_tolerance=1.0))
        selection = _select(strict, [make_supplier(price_from=201)], budget=200)
        assert selection.reason == "no-suppliers-in-budget"

    @pytest.mark.parametrize("budget", [0, 50, 100, 150, 300])
    def test_selected_price_never_exceeds_tolerance(self, budget):
        candidates = [
            make_supplier(id=f"s{price}", price_from=price)
            for price in (40, 90, 140, 220, 400)
        ]
        selection = _select(CategorySelector(), candidates, budget=budget)
        if selection.supplier is not None:
            assert selection.supplier.price_from <= budget * 1.3


class TestRanking:
    def test_best_available_match(self):
        plain = make_supplier(id="plain", themes=None)
        themed = make_supplier(id="themed", themes=["princess"])
        selection = _select(CategorySelector(), [plain, themed])
        assert selection.supplier.id == "themed"
        assert selection.reason == "best-available-match"
        assert selection.requires_confirmation is False
        assert selection.result.is_fallback_selection is False

    def test_available_beats_higher_scoring_unavailable(self):
        star = make_supplier(
            id="star", themes=["princess"], rating=5.0, availability=BLOCKED
        )
        humble = make_supplier(id="humble", themes=None, rating=3.0)
        selection = _select(CategorySelector(), [star, humble])
        assert selection.supplier.id == "humble"
        assert selection.reason == "best-available-match"

    def test_out_of_range_is_skipped(self):
        far = make_supplier(
            id="far",
            category=SupplierCategory.CAKES,
            location="E1 6AN",
            themes=["princess"],
        )
        near = make_supplier(id="near", category=SupplierCategory.CAKES, themes=None)
        selection = _select(CategorySelector(), [far, near])
        assert selection.supplier.id == "near"

    def test_ties_keep_catalog_order(self):
        first = make_supplier(id="first")
        second = make_supplier(id="second")
        assert _select(CategorySelector(), [first, second]).supplier.id == "first"
        assert _select(CategorySelector(), [second, first]).supplier.id == "second"

    def test_rank_orders_descending(self):
        low = make_supplier(id="low", rating=1.0)
        high = make_supplier(id="high", rating=5.0)
        ranked = CategorySelector().rank(
            [low, high], "princess", "afternoon", PARTY_DAY, "W3 7QD"
        )
        assert [r.supplier.id for r in ranked] == ["high", "low"]

    def test_deterministic(self):
        candidates = [
            make_supplier(id=f"s{i}", rating=4.0 + (i % 3) / 10) for i in range(8)
        ]
        selector = CategorySelector()
        first = _select(selector, candidates)
        for _ in range(5):
            again = _select(selector, candidates)
            assert again.supplier.id == first.supplier.id
            assert again.result.composite_score == first.result.composite_score


class TestFallback:
    def test_single_unavailable_candidate_is_fallback(self):
        only = make_supplier(availability=BLOCKED)
        selection = _select(CategorySelector(), [only])
        assert selection.supplier == only
        assert selection.reason == "best-fallback-match"
        assert selection.requires_confirmation is True
        assert selection.result.is_fallback_selection is True
        assert selection.result.availability_reason == "date-blocked"

    def test_fallback_is_top_scorer(self):
        weak = make_supplier(id="weak", rating=2.0, availability=BLOCKED)
        strong = make_supplier(
            id="strong", themes=["princess"], rating=5.0, availability=BLOCKED
        )
        selection = _select(CategorySelector(), [weak, strong])
        assert selection.supplier.id == "strong"


class TestCompositeScore:
    def test_adjustments(self):
        selector = CategorySelector()
        supplier = make_supplier(themes=None, rating=None, location="W3 7QD")
        result = selector.score_candidate(
            supplier, "princess", "afternoon", PARTY_DAY, "W3 7QD"
        )
        # base 50, no availability data (+10), exact match (+15)
        assert result.composite_score == 75
        assert result.is_available and result.can_serve_location

    def test_penalties(self):
        selector = CategorySelector()
        supplier = make_supplier(
            category=SupplierCategory.CAKES,
            themes=None,
            rating=None,
            location="E1 6AN",
            availability=BLOCKED,
        )
        result = selector.score_candidate(
            supplier, "princess", "afternoon", PARTY_DAY, "W3 7QD"
        )
        assert result.composite_score == 50 - 30 - 20

    def test_bonus(self):
        selector = CategorySelector()
        supplier = make_supplier(themes=None, rating=None)
        plain = selector.score_candidate(supplier, "x", "afternoon", PARTY_DAY, "W3 7QD")
        boosted = selector.score_candidate(
            supplier, "x", "afternoon", PARTY_DAY, "W3 7QD", bonus=10
        )
        assert boosted.composite_score == plain.composite_score + 10
