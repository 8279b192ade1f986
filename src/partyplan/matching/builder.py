"""Assemble a full party plan from a brief and a catalog snapshot."""

import re

from pydantic import BaseModel

from partyplan import logger
from partyplan.matching.budget import CATEGORY_SOURCES, BudgetAllocation, BudgetAllocator
from partyplan.matching.catalog import CatalogPort, entertainment_by_theme
from partyplan.matching.config import EngineConfig
from partyplan.matching.models.brief import PartyBrief
from partyplan.matching.models.plan import (
    BEST_AVAILABLE_MATCH,
    CategorySelection,
    PartyPlan,
    PlanItem,
)
from partyplan.matching.models.supplier import Supplier, SupplierCategory
from partyplan.matching.selector import CategorySelector
from partyplan.matching.themes import ThemeInfo, get_theme

_SOFT_PLAY_NAME = re.compile(r"soft play|bouncy castle|inflatable", re.IGNORECASE)


def is_soft_play(supplier: Supplier) -> bool:
    if supplier.category != SupplierCategory.ACTIVITIES:
        return False
    return bool(_SOFT_PLAY_NAME.search(supplier.name)) or (
        "soft play" in supplier.description.lower()
    )


def candidates_for(category: str, suppliers: list[Supplier]) -> list[Supplier]:
    """Catalog suppliers eligible for a plan slot, in catalog order."""
    if category == "softPlay":
        return [s for s in suppliers if is_soft_play(s)]
    source = CATEGORY_SOURCES.get(category)
    if source is None:
        return []
    return [s for s in suppliers if s.category == source]


class PartyBuildResult(BaseModel):
    """A built plan together with how it was arrived at."""

    plan: PartyPlan
    selections: dict[str, CategorySelection]
    allocation: BudgetAllocation
    theme: ThemeInfo
    brief: PartyBrief

    @property
    def budget(self) -> float:
        return self.allocation.budget

    @property
    def total_cost(self) -> float:
        return self.plan.total_cost

    @property
    def grand_total(self) -> float:
        return self.plan.grand_total

    @property
    def budget_used_pct(self) -> float:
        if self.budget <= 0:
            return 0.0
        return round(self.total_cost / self.budget * 100, 1)

    @property
    def needs_confirmation(self) -> list[str]:
        return self.plan.needs_confirmation

    def summary(self) -> dict:
        return {
            "theme": self.theme.name,
            "tier": self.allocation.tier,
            "budget": self.budget,
            "guestCount": self.brief.guest_count,
            "timeSlot": self.brief.time_slot.value,
            "timeWindow": self.brief.time_window,
            "duration": self.brief.display_duration,
            "totalCost": self.total_cost,
            "grandTotal": self.grand_total,
            "budgetUsedPct": self.budget_used_pct,
            "suppliersSelected": len(self.plan.selected),
            "needsConfirmation": self.needs_confirmation,
        }


class PartyPlanBuilder:
    """Fills each category of a plan independently from its own sub-budget.

    Entertainment is resolved first, from the theme-filtered pool when that
    yields an available supplier and from the whole Entertainment category
    otherwise. If neither pool has an available match the better-scoring
    fallback is kept, the themed one on a tie.
    Categories are never revisited once chosen.
    """

    def __init__(
        self,
        catalog: CatalogPort | None = None,
        config: EngineConfig | None = None,
        selector: CategorySelector | None = None,
        allocator: BudgetAllocator | None = None,
    ) -> None:
        self._catalog = catalog
        self._config = config or EngineConfig()
        self._selector = selector or CategorySelector(self._config)
        self._allocator = allocator or BudgetAllocator()

    def _select(
        self,
        category: str,
        candidates: list[Supplier],
        brief: PartyBrief,
        allocation: BudgetAllocation,
        bonus: float = 0.0,
    ) -> CategorySelection:
        return self._selector.select(
            candidates,
            category,
            brief.theme,
            brief.time_slot,
            brief.party_date,
            brief.location,
            allocation.category_budget(category),
            bonus=bonus,
        )

    def _select_entertainment(
        self,
        brief: PartyBrief,
        suppliers: list[Supplier],
        themed: list[Supplier],
        allocation: BudgetAllocation,
    ) -> CategorySelection:
        themed_selection = None
        if themed:
            themed_selection = self._select("entertainment", themed, brief, allocation)
            if themed_selection.reason == BEST_AVAILABLE_MATCH:
                return themed_selection
            logger.info(
                f"No available themed entertainment for '{brief.theme}'; "
                "trying all entertainment suppliers"
            )
        general = self._select(
            "entertainment", candidates_for("entertainment", suppliers), brief, allocation
        )
        if themed_selection is None or themed_selection.result is None:
            return general
        if general.result is None:
            return themed_selection
        if general.reason == BEST_AVAILABLE_MATCH:
            return general
        # both are fallbacks; the themed one wins ties
        if general.result.composite_score > themed_selection.result.composite_score:
            return general
        return themed_selection

    def plan_party(
        self,
        brief: PartyBrief,
        suppliers: list[Supplier],
        themed_entertainment: list[Supplier] | None = None,
    ) -> PartyBuildResult:
        """Build a plan from an in-memory catalog snapshot. Performs no I/O."""
        budget = brief.effective_budget
        allocation = self._allocator.allocate(budget, brief.guest_count)
        logger.info(
            f"Planning {brief.theme} party for {brief.guest_count} guests, "
            f"£{budget:.0f}, {brief.display_time_slot}"
        )

        plan = PartyPlan()
        selections: dict[str, CategorySelection] = {}

        categories = list(allocation.included_categories)
        if "entertainment" in categories:
            selections["entertainment"] = self._select_entertainment(
                brief, suppliers, themed_entertainment or [], allocation
            )
            categories.remove("entertainment")

        for category in categories:
            bonus = self._config.soft_play_bonus if category == "softPlay" else 0.0
            selections[category] = self._select(
                category,
                candidates_for(category, suppliers),
                brief,
                allocation,
                bonus=bonus,
            )

        for category, selection in selections.items():
            if selection.result is not None:
                plan.slots[category] = PlanItem.from_selection(selection.result)

        result = PartyBuildResult(
            plan=plan,
            selections=selections,
            allocation=allocation,
            theme=get_theme(brief.theme),
            brief=brief,
        )
        logger.info(
            f"Plan ready: {len(plan.selected)} suppliers, £{result.total_cost:.0f} "
            f"({result.budget_used_pct}% of budget)"
        )
        if result.needs_confirmation:
            logger.warning(
                f"Needs confirmation: {', '.join(result.needs_confirmation)}"
            )
        return result

    async def build(self, brief: PartyBrief) -> PartyBuildResult:
        """Fetch the catalog once, then plan without further I/O."""
        if self._catalog is None:
            raise ValueError("PartyPlanBuilder.build requires a catalog")
        suppliers = await self._catalog.get_all_suppliers()
        themed = entertainment_by_theme(suppliers, brief.theme)
        logger.debug(
            f"Catalog snapshot: {len(suppliers)} suppliers, "
            f"{len(themed)} themed entertainers"
        )
        return self.plan_party(brief, suppliers, themed)
