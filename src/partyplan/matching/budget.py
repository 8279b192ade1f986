"""Budget tiers: how a total budget is split across plan categories."""

from pydantic import BaseModel, Field

from partyplan import logger
from partyplan.matching.models.supplier import SupplierCategory

LARGE_PARTY_GUESTS = 30

# Plan slot → catalog category it draws candidates from.
CATEGORY_SOURCES: dict[str, SupplierCategory] = {
    "venue": SupplierCategory.VENUES,
    "entertainment": SupplierCategory.ENTERTAINMENT,
    "catering": SupplierCategory.CATERING,
    "cakes": SupplierCategory.CAKES,
    "decorations": SupplierCategory.DECORATIONS,
    "activities": SupplierCategory.ACTIVITIES,
    "partyBags": SupplierCategory.PARTY_BAGS,
    "facePainting": SupplierCategory.FACE_PAINTING,
    "balloons": SupplierCategory.BALLOONS,
    "softPlay": SupplierCategory.ACTIVITIES,
}


class BudgetTier(BaseModel):
    name: str
    allocation: dict[str, float] = Field(
        ..., description="Plan category → fraction of the total budget."
    )

    @property
    def included_categories(self) -> list[str]:
        return list(self.allocation)


ESSENTIAL = BudgetTier(
    name="essential",
    allocation={"venue": 0.45, "entertainment": 0.35, "cakes": 0.15, "partyBags": 0.05},
)
COMPLETE = BudgetTier(
    name="complete",
    allocation={"venue": 0.35, "entertainment": 0.35, "cakes": 0.25, "partyBags": 0.05},
)
PREMIUM = BudgetTier(
    name="premium",
    allocation={
        "venue": 0.25,
        "entertainment": 0.30,
        "cakes": 0.20,
        "decorations": 0.15,
        "activities": 0.06,
        "partyBags": 0.04,
    },
)
PREMIUM_LARGE = BudgetTier(
    name="premium-large",
    allocation={
        "venue": 0.25,
        "entertainment": 0.25,
        "cakes": 0.15,
        "decorations": 0.08,
        "activities": 0.15,
        "partyBags": 0.04,
        "softPlay": 0.08,
    },
)


class BudgetAllocation(BaseModel):
    """A tier applied to a concrete budget."""

    tier: str
    budget: float
    included_categories: list[str]
    allocation: dict[str, float]

    def category_budget(self, category: str) -> float:
        """Absolute sub-budget for a category; 0 for categories outside the tier."""
        return self.budget * self.allocation.get(category, 0.0)


def select_tier(budget: float, guest_count: int) -> BudgetTier:
    if budget <= 500:
        return ESSENTIAL
    if budget <= 700:
        return COMPLETE
    if guest_count >= LARGE_PARTY_GUESTS:
        return PREMIUM_LARGE
    return PREMIUM


class BudgetAllocator:
    def allocate(self, budget: float, guest_count: int) -> BudgetAllocation:
        """Pick the tier for this budget and guest count.

        Never fails: a zero or negative budget lands in the lowest tier.
        """
        tier = select_tier(budget, guest_count)
        logger.info(
            f"Budget £{budget:.0f} for {guest_count} guests → {tier.name} tier "
            f"({', '.join(tier.included_categories)})"
        )
        return BudgetAllocation(
            tier=tier.name,
            budget=budget,
            included_categories=tier.included_categories,
            allocation=dict(tier.allocation),
        )
