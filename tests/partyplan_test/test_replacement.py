"""Unit tests for replacement-supplier ranking."""

import pytest

from partyplan.matching.models.supplier import SupplierCategory
from partyplan.matching.replacement import (
    ReplacementEngine,
    ReplacementScorer,
    category_matches,
    create_replacement,
    fallback_categories,
    find_candidates,
    rank_replacements,
)
from tests.partyplan_test.conftest import FakeCatalog, make_brief, make_supplier

scorer = ReplacementScorer()


def _venue(id, rating, price=200.0, **kwargs):
    return make_supplier(
        id=id,
        name=f"Venue {id}",
        category=SupplierCategory.VENUES,
        rating=rating,
        price_from=price,
        **kwargs,
    )


class TestCategoryMatching:
    @pytest.mark.parametrize(
        "have,want",
        [("Venues", "venues"), ("Venues", "Venue"), ("Party Bags", "party bags")],
    )
    def test_flexible_matches(self, have, want):
        assert category_matches(have, want)

    def test_unrelated(self):
        assert not category_matches("Cakes", "Venues")

    def test_empty_never_matches(self):
        assert not category_matches("Cakes", "")

    def test_find_candidates_excludes_rejected(self):
        rejected = _venue("a", 4.0)
        other = _venue("b", 4.0)
        cake = make_supplier(id="c", category=SupplierCategory.CAKES)
        assert find_candidates([rejected, other, cake], "Venues", "a") == [other]


class TestFallbackCategories:
    def test_specific_list_comes_first(self):
        assert fallback_categories("Activities")[:2] == ["Entertainment", "Face Painting"]

    def test_original_removed_and_deduped(self):
        fallbacks = fallback_categories("Entertainment")
        assert "Entertainment" not in fallbacks
        assert len(fallbacks) == len(set(fallbacks))
        assert fallbacks[0] == "Activities"

    def test_unknown_category_gets_catch_all(self):
        assert fallback_categories("Photography")[0] == "Entertainment"
        assert len(fallback_categories("Photography")) == 8


class TestScore:
    def test_baseline_only(self):
        rejected = _venue("old", 4.5, price=200, review_count=100)
        candidate = _venue("new", 4.0, price=250, review_count=10)
        assert scorer.score(candidate, rejected, None) == 10

    def test_every_bonus(self):
        rejected = _venue("old", 4.0, price=300, avg_response_time=48)
        candidate = _venue(
            "new",
            4.5,
            price=200,
            themes=["princess"],
            review_count=500,
            is_premium=True,
            avg_response_time=2,
        )
        # rating 5 + savings capped 10 + theme 25 + reviews capped 15
        # + premium 15 + response 10 + baseline 10
        assert scorer.score(candidate, rejected, "princess") == pytest.approx(90)

    def test_savings_are_capped(self):
        rejected = _venue("old", 4.0, price=1000)
        candidate = _venue("new", 4.0, price=100)
        assert scorer.score(candidate, rejected, None) == pytest.approx(20 + 10)

    def test_same_price_bonus(self):
        rejected = _venue("old", 4.0)
        candidate = _venue("new", 4.0)
        assert scorer.score(candidate, rejected, None) == 20

    def test_missing_rating_defaults(self):
        rejected = _venue("old", None)
        candidate = _venue("new", 4.5, price=250)
        assert scorer.score(candidate, rejected, None) == pytest.approx(15)

    def test_untagged_candidate_gets_theme_bonus(self):
        rejected = _venue("old", 4.5, price=200, review_count=100)
        candidate = _venue("new", 4.0, price=250, review_count=10)
        assert scorer.score(candidate, rejected, "princess") == pytest.approx(35)

    def test_other_theme_tag_gets_no_bonus(self):
        rejected = _venue("old", 4.5, price=200, review_count=100)
        candidate = _venue("new", 4.0, price=250, review_count=10, themes=["pirate"])
        assert scorer.score(candidate, rejected, "princess") == 10


class TestReasonAndImprovements:
    def test_better_reviews_needs_margin(self):
        """4.2 → 4.8 is a material rating gain."""
        old = _venue("old", 4.2)
        new = _venue("new", 4.8)
        assert scorer.reason(old, new) == "better_reviews"

    def test_small_rating_gain_falls_through_to_price(self):
        old = _venue("old", 4.2)
        new = _venue("new", 4.4)
        assert scorer.reason(old, new) == "same_price"

    def test_better_price(self):
        assert scorer.reason(_venue("old", 4.5, 200), _venue("new", 4.5, 150)) == "better_price"

    def test_faster_response(self):
        old = _venue("old", 4.5, 200, avg_response_time=30)
        new = _venue("new", 4.5, 250, avg_response_time=4)
        assert scorer.reason(old, new) == "faster_response"

    def test_premium_upgrade(self):
        old = _venue("old", 4.5, 200)
        new = _venue("new", 4.5, 250, is_premium=True)
        assert scorer.reason(old, new) == "premium_upgrade"

    def test_default_reason(self):
        assert scorer.reason(_venue("old", 4.5, 200), _venue("new", 4.5, 250)) == "availability"

    def test_improvement_text(self):
        old = _venue("old", 4.2, 200, review_count=3)
        new = _venue("new", 4.8, 180, review_count=40, is_premium=True, avg_response_time=2)
        assert scorer.improvements(old, new) == [
            "Higher rating (4.8 vs 4.2 stars)",
            "£20 cheaper than original",
            "40 customer reviews",
            "Premium verified supplier",
            "Faster response time",
        ]

    def test_default_improvement(self):
        notes = scorer.improvements(_venue("old", 4.5, 200), _venue("new", 4.5, 250))
        assert notes == ["Available for your party date"]


class TestCreateReplacement:
    def test_same_category_preferred(self):
        rejected = _venue("old", 4.2)
        better = _venue("better", 4.8)
        cake = make_supplier(id="cake", category=SupplierCategory.CAKES, rating=5.0)
        replacement = create_replacement(rejected, make_brief(), [rejected, cake, better])

        assert replacement.new_supplier.id == "better"
        assert replacement.reason == "better_reviews"
        assert replacement.category == "Venues"
        assert replacement.status == "pending_approval"
        assert replacement.auto_approved is False
        assert replacement.id.startswith("replacement-")

    def test_uses_fallback_category(self):
        rejected = _venue("old", 4.2)
        entertainer = make_supplier(id="ent", category=SupplierCategory.ENTERTAINMENT)
        replacement = create_replacement(rejected, None, [rejected, entertainer])
        assert replacement.new_supplier.id == "ent"

    def test_none_when_nothing_else(self):
        rejected = _venue("old", 4.2)
        assert create_replacement(rejected, None, [rejected]) is None

    def test_shortlist_capped(self):
        rejected = _venue("old", 3.0)
        candidates = [_venue(f"v{i}", 4.0 + i / 10) for i in range(8)]
        ranked = rank_replacements(candidates, rejected, None)
        assert len(ranked) == 5
        assert ranked[0].supplier.id == "v7"

    def test_record_shape(self):
        rejected = _venue("old", None)
        replacement = create_replacement(rejected, None, [rejected, _venue("new", 4.6)])
        record = replacement.to_record()
        assert record["oldSupplier"]["rating"] == 4.0
        assert record["newSupplier"]["reviewCount"] == 0
        assert record["autoApproved"] is False
        assert "createdAt" in record


class TestReplacementEngine:
    @pytest.mark.asyncio
    async def test_find_replacement(self):
        rejected = _venue("old", 4.2)
        catalog = FakeCatalog([rejected, _venue("new", 4.8)])
        replacement = await ReplacementEngine(catalog).find_replacement(
            rejected, make_brief()
        )
        assert replacement.new_supplier.id == "new"
        assert catalog.calls == 1
