"""Theme and rating affinity of a single supplier."""

from partyplan import logger
from partyplan.matching.config import EngineConfig
from partyplan.matching.models.brief import NO_THEME
from partyplan.matching.models.supplier import Supplier


class SupplierScorer:
    """Scores how well a supplier fits a party theme (higher is better).

    For ``no-theme`` parties, untagged suppliers and those tagged ``general``
    are preferred.  For named themes, points come from the supplier's theme
    tags, its service-detail themes, and the theme appearing in its name or
    description.  Rating adds on top in both cases.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()

    def score(self, supplier: Supplier, theme: str) -> float:
        cfg = self._config
        try:
            score = cfg.base_score
            if theme == NO_THEME:
                if not supplier.themes:
                    score += cfg.no_theme_untagged
                if supplier.themes and "general" in supplier.themes:
                    score += cfg.no_theme_general
            else:
                lowered = (theme or "").lower()
                if supplier.themes and theme in supplier.themes:
                    score += cfg.theme_match
                if theme in supplier.service_themes:
                    score += cfg.service_theme_match
                if lowered and lowered in supplier.name.lower():
                    score += cfg.name_match
                if lowered and lowered in supplier.description.lower():
                    score += cfg.description_match

            score += (supplier.rating or 0.0) * cfg.rating_weight
            return score
        except Exception as e:
            logger.warning(f"Theme scoring failed for {getattr(supplier, 'id', '?')}: {e}")
            return cfg.base_score
