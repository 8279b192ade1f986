"""Find a substitute when a parent rejects a supplier from their plan."""

from partyplan import logger
from partyplan.matching.catalog import CatalogPort
from partyplan.matching.config import EngineConfig
from partyplan.matching.models.brief import PartyBrief
from partyplan.matching.models.plan import RankedAlternative, Replacement, SupplierSummary
from partyplan.matching.models.supplier import Supplier

# Rejected category (lowercase) → categories to try, in order.
FALLBACK_CATEGORIES: dict[str, list[str]] = {
    "activities": ["Entertainment", "Face Painting", "Activities"],
    "entertainment": ["Entertainment", "Activities", "Face Painting"],
    "venue": ["Venues", "Entertainment"],
    "venues": ["Venues", "Entertainment"],
    "catering": ["Catering", "Party Bags"],
    "decorations": ["Decorations", "Party Bags"],
    "balloons": ["Decorations", "Party Bags"],
    "face painting": ["Face Painting", "Entertainment", "Activities"],
    "facepainting": ["Face Painting", "Entertainment", "Activities"],
    "party bags": ["Party Bags", "Catering"],
    "partybags": ["Party Bags", "Catering"],
    "cakes": ["Cakes"],
}

CATCH_ALL_CATEGORIES = [
    "Entertainment",
    "Catering",
    "Venues",
    "Decorations",
    "Activities",
    "Face Painting",
    "Party Bags",
    "Cakes",
]


def category_matches(supplier_category: str, wanted: str) -> bool:
    """Case-insensitive match allowing containment either way ("Venue" ~ "Venues")."""
    have = supplier_category.lower()
    want = wanted.lower()
    return bool(have) and bool(want) and (have == want or want in have or have in want)


def find_candidates(
    suppliers: list[Supplier], category: str, exclude_id: str
) -> list[Supplier]:
    return [
        s
        for s in suppliers
        if s.id != exclude_id and category_matches(s.category.value, category)
    ]


def fallback_categories(category: str) -> list[str]:
    """Categories to try after the rejected one, without duplicates or the original."""
    lowered = category.lower()
    ordered: list[str] = []
    for name in FALLBACK_CATEGORIES.get(lowered, []) + CATCH_ALL_CATEGORIES:
        if name not in ordered and name.lower() != lowered:
            ordered.append(name)
    return ordered


class ReplacementScorer:
    """Compares a candidate against the rejected supplier it would replace.

    Missing ratings count as 4.0 and missing response times as 24 hours.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()

    def _rating(self, supplier: Supplier) -> float:
        if supplier.rating is None:
            return self._config.replacement_default_rating
        return supplier.rating

    def _response(self, supplier: Supplier) -> float:
        if supplier.avg_response_time is None:
            return self._config.replacement_default_response_hours
        return supplier.avg_response_time

    def score(self, candidate: Supplier, rejected: Supplier, theme: str | None) -> float:
        cfg = self._config
        score = 0.0

        rating_gain = self._rating(candidate) - self._rating(rejected)
        if rating_gain > 0:
            score += rating_gain * cfg.replacement_rating_weight

        if candidate.price_from < rejected.price_from:
            savings = rejected.price_from - candidate.price_from
            score += min(savings / 10, cfg.replacement_max_savings)
        elif candidate.price_from == rejected.price_from:
            score += cfg.replacement_same_price

        # untagged candidates are assumed to do the party's theme
        if theme and (not candidate.themes or theme in candidate.themes):
            score += cfg.replacement_theme_match

        if candidate.review_count > rejected.review_count:
            extra = candidate.review_count - rejected.review_count
            score += min(extra / 10, cfg.replacement_max_reviews)

        if candidate.is_premium and not rejected.is_premium:
            score += cfg.replacement_premium

        if self._response(candidate) < self._response(rejected):
            score += cfg.replacement_faster_response

        return score + cfg.replacement_baseline

    def improvements(self, rejected: Supplier, candidate: Supplier) -> list[str]:
        """Human-readable reasons the candidate is a better pick."""
        notes: list[str] = []
        old_rating = self._rating(rejected)
        new_rating = self._rating(candidate)
        if new_rating > old_rating:
            notes.append(f"Higher rating ({new_rating:g} vs {old_rating:g} stars)")

        if candidate.price_from < rejected.price_from:
            notes.append(
                f"£{rejected.price_from - candidate.price_from:g} cheaper than original"
            )
        elif candidate.price_from == rejected.price_from:
            notes.append("Same price as original")

        if candidate.review_count > rejected.review_count:
            notes.append(f"{candidate.review_count} customer reviews")
        if candidate.is_premium and not rejected.is_premium:
            notes.append("Premium verified supplier")
        if self._response(candidate) < self._response(rejected):
            notes.append("Faster response time")

        return notes or ["Available for your party date"]

    def reason(self, rejected: Supplier, candidate: Supplier) -> str:
        """The single dominant reason, by fixed priority."""
        if self._rating(candidate) > (
            self._rating(rejected) + self._config.replacement_rating_margin
        ):
            return "better_reviews"
        if candidate.price_from < rejected.price_from:
            return "better_price"
        if candidate.price_from == rejected.price_from:
            return "same_price"
        if self._response(candidate) < self._response(rejected):
            return "faster_response"
        if candidate.is_premium and not rejected.is_premium:
            return "premium_upgrade"
        return "availability"


def rank_replacements(
    candidates: list[Supplier],
    rejected: Supplier,
    theme: str | None,
    config: EngineConfig | None = None,
) -> list[RankedAlternative]:
    """Score candidates and keep the best few, highest first (ties keep catalog order)."""
    config = config or EngineConfig()
    scorer = ReplacementScorer(config)
    ranked = sorted(
        (RankedAlternative(supplier=c, score=scorer.score(c, rejected, theme)) for c in candidates),
        key=lambda r: r.score,
        reverse=True,
    )
    return ranked[: config.replacement_shortlist]


def create_replacement(
    rejected: Supplier,
    brief: PartyBrief | None,
    suppliers: list[Supplier],
    config: EngineConfig | None = None,
) -> Replacement | None:
    """Pick a replacement from a catalog snapshot, or None if nothing qualifies.

    The rejected supplier's own category is tried first, then its fallback
    categories in order until one yields candidates.
    """
    config = config or EngineConfig()
    category = rejected.category.value
    theme = brief.theme if brief else None

    candidates = find_candidates(suppliers, category, rejected.id)
    if not candidates:
        for fallback in fallback_categories(category):
            candidates = find_candidates(suppliers, fallback, rejected.id)
            if candidates:
                logger.info(f"No {category} alternatives; using {fallback} suppliers")
                break

    if not candidates:
        logger.warning(f"No replacement found for {rejected.name} ({rejected.id})")
        return None

    ranked = rank_replacements(candidates, rejected, theme, config)
    best = ranked[0]
    scorer = ReplacementScorer(config)
    replacement = Replacement(
        category=category,
        reason=scorer.reason(rejected, best.supplier),
        old_supplier=SupplierSummary.of(rejected, config.replacement_default_rating),
        new_supplier=SupplierSummary.of(best.supplier, config.replacement_default_rating),
        improvements=scorer.improvements(rejected, best.supplier),
        score=best.score,
    )
    logger.info(
        f"Replacing {rejected.name} with {best.supplier.name} "
        f"({replacement.reason}, score {best.score:.1f})"
    )
    return replacement


class ReplacementEngine:
    def __init__(self, catalog: CatalogPort, config: EngineConfig | None = None) -> None:
        self._catalog = catalog
        self._config = config or EngineConfig()

    async def find_replacement(
        self, rejected: Supplier, brief: PartyBrief | None = None
    ) -> Replacement | None:
        suppliers = await self._catalog.get_all_suppliers()
        return create_replacement(rejected, brief, suppliers, self._config)
