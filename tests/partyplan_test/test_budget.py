"""Unit tests for budget tiers and allocation."""

import pytest

from partyplan.matching.budget import (
    COMPLETE,
    ESSENTIAL,
    PREMIUM,
    PREMIUM_LARGE,
    BudgetAllocator,
    select_tier,
)


class TestTierTables:
    @pytest.mark.parametrize("tier", [ESSENTIAL, COMPLETE, PREMIUM, PREMIUM_LARGE])
    def test_fractions_never_exceed_whole_budget(self, tier):
        assert sum(tier.allocation.values()) <= 1.0 + 1e-9

    def test_essential_and_complete_sum_to_one(self):
        assert sum(ESSENTIAL.allocation.values()) == pytest.approx(1.0)
        assert sum(COMPLETE.allocation.values()) == pytest.approx(1.0)

    def test_every_tier_covers_core_categories(self):
        for tier in (ESSENTIAL, COMPLETE, PREMIUM, PREMIUM_LARGE):
            for category in ("venue", "entertainment", "cakes", "partyBags"):
                assert category in tier.included_categories


class TestSelectTier:
    @pytest.mark.parametrize(
        "budget,guests,expected",
        [
            (0, 10, "essential"),
            (-50, 10, "essential"),
            (400, 10, "essential"),
            (500, 40, "essential"),
            (501, 10, "complete"),
            (700, 10, "complete"),
            (701, 10, "premium"),
            (1000, 29, "premium"),
            (1000, 30, "premium-large"),
        ],
    )
    def test_boundaries(self, budget, guests, expected):
        assert select_tier(budget, guests).name == expected

    def test_large_party_includes_soft_play(self):
        allocation = BudgetAllocator().allocate(1000, 35)
        assert "softPlay" in allocation.included_categories

    def test_regular_party_excludes_soft_play(self):
        allocation = BudgetAllocator().allocate(1000, 20)
        assert "softPlay" not in allocation.included_categories


class TestBudgetAllocation:
    def test_category_budget_is_fraction_of_total(self):
        allocation = BudgetAllocator().allocate(500, 10)
        assert allocation.tier == "essential"
        assert allocation.category_budget("venue") == pytest.approx(225)
        assert allocation.category_budget("entertainment") == pytest.approx(175)

    def test_excluded_category_gets_nothing(self):
        allocation = BudgetAllocator().allocate(500, 10)
        assert allocation.category_budget("decorations") == 0

    def test_allocation_is_a_copy_of_the_tier(self):
        allocation = BudgetAllocator().allocate(800, 10)
        allocation.allocation["venue"] = 0.99
        assert PREMIUM.allocation["venue"] == 0.25
