"""Per-category supplier selection.

Candidates are filtered by price, scored, and ranked.  The winner is the
highest-scoring candidate that is both available and in range; when none is,
the overall highest-scoring candidate is returned as a fallback flagged for
user confirmation.  Only an empty or entirely over-budget candidate list
leaves a category unfilled.
"""

from datetime import date

from partyplan import logger
from partyplan.matching.availability import (
    CONFIDENCE_HIGH,
    AvailabilityCheck,
    AvailabilityOracle,
)
from partyplan.matching.config import EngineConfig
from partyplan.matching.location import (
    LocationProximity,
    LocationVerdict,
    radius_for_supplier,
)
from partyplan.matching.models.plan import (
    BEST_AVAILABLE_MATCH,
    BEST_FALLBACK_MATCH,
    NO_SUPPLIERS_FOUND,
    NO_SUPPLIERS_IN_BUDGET,
    CategorySelection,
    SelectionResult,
)
from partyplan.matching.models.supplier import Supplier, TimeSlot
from partyplan.matching.scoring import SupplierScorer


class CategorySelector:
    def __init__(
        self,
        config: EngineConfig | None = None,
        oracle: AvailabilityOracle | None = None,
        proximity: LocationProximity | None = None,
        scorer: SupplierScorer | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._oracle = oracle or AvailabilityOracle()
        self._proximity = proximity or LocationProximity()
        self._scorer = scorer or SupplierScorer(self._config)

    def within_budget(self, supplier: Supplier, category_budget: float) -> bool:
        return supplier.price_from <= category_budget * self._config.budget_tolerance

    def _availability_adjustment(self, check: AvailabilityCheck) -> float:
        if not check.available:
            return self._config.availability_penalty
        if check.confidence == CONFIDENCE_HIGH:
            return self._config.availability_confirmed
        return self._config.availability_uncertain

    def _location_adjustment(self, verdict: LocationVerdict) -> float:
        if not verdict.allowed:
            return self._config.location_penalty
        if verdict.confident:
            return self._config.location_confirmed
        return self._config.location_uncertain

    def score_candidate(
        self,
        supplier: Supplier,
        theme: str,
        time_slot: TimeSlot | str,
        party_date: date | str | None,
        location: str,
        bonus: float = 0.0,
    ) -> SelectionResult:
        """Composite score = theme affinity + availability and location adjustments."""
        check = self._oracle.check(supplier, party_date, time_slot)
        verdict = self._proximity.assess(
            supplier.location, location, radius_for_supplier(supplier)
        )
        composite = (
            self._scorer.score(supplier, theme)
            + self._availability_adjustment(check)
            + self._location_adjustment(verdict)
            + bonus
        )
        return SelectionResult(
            supplier=supplier,
            composite_score=composite,
            is_available=check.available,
            can_serve_location=verdict.allowed,
            availability_reason=check.reason,
            location_reason=verdict.reason,
        )

    def rank(
        self,
        candidates: list[Supplier],
        theme: str,
        time_slot: TimeSlot | str,
        party_date: date | str | None,
        location: str,
        bonus: float = 0.0,
    ) -> list[SelectionResult]:
        """Score and sort descending.  Ties keep catalog order."""
        scored = [
            self.score_candidate(s, theme, time_slot, party_date, location, bonus)
            for s in candidates
        ]
        return sorted(scored, key=lambda r: r.composite_score, reverse=True)

    def select(
        self,
        candidates: list[Supplier],
        category: str,
        theme: str,
        time_slot: TimeSlot | str,
        party_date: date | str | None,
        location: str,
        category_budget: float,
        bonus: float = 0.0,
    ) -> CategorySelection:
        if not candidates:
            logger.info(f"{category}: no candidates in catalog")
            return CategorySelection(category=category, reason=NO_SUPPLIERS_FOUND)

        affordable = [s for s in candidates if self.within_budget(s, category_budget)]
        if not affordable:
            logger.info(
                f"{category}: none of {len(candidates)} candidates within "
                f"£{category_budget * self._config.budget_tolerance:.0f}"
            )
            return CategorySelection(category=category, reason=NO_SUPPLIERS_IN_BUDGET)

        ranked = self.rank(affordable, theme, time_slot, party_date, location, bonus)
        for r in ranked[:3]:
            logger.debug(
                f"{category}: {r.supplier.name} score={r.composite_score:.1f} "
                f"available={r.is_available} ({r.availability_reason}) "
                f"location={r.can_serve_location} ({r.location_reason})"
            )

        for result in ranked:
            if result.is_available and result.can_serve_location:
                logger.info(
                    f"{category}: selected {result.supplier.name} "
                    f"(£{result.supplier.price_from:.0f})"
                )
                return CategorySelection(
                    category=category,
                    result=result,
                    reason=BEST_AVAILABLE_MATCH,
                    requires_confirmation=False,
                )

        fallback = ranked[0].model_copy(update={"is_fallback_selection": True})
        logger.warning(
            f"{category}: no available in-range supplier; falling back to "
            f"{fallback.supplier.name} pending confirmation"
        )
        return CategorySelection(
            category=category,
            result=fallback,
            reason=BEST_FALLBACK_MATCH,
            requires_confirmation=True,
        )
