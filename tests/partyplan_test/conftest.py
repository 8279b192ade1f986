"""Shared fixtures and factories for matching tests."""

from datetime import date

from partyplan.matching.catalog import CatalogPort
from partyplan.matching.models.brief import PartyBrief
from partyplan.matching.models.supplier import Supplier, SupplierCategory

# 2026-11-14 is a Saturday
PARTY_DAY = date(2026, 11, 14)

# ---------------------------------------------------------------------------
# Factories / Builders
# ---------------------------------------------------------------------------


def make_supplier(
    id: str = "sup-1",
    name: str = "Test Supplier",
    category: SupplierCategory = SupplierCategory.ENTERTAINMENT,
    location: str = "W3 7QD",
    price_from: float = 100.0,
    rating: float | None = 4.5,
    themes: list[str] | None = None,
    **kwargs,
) -> Supplier:
    """Factory for Supplier with sensible defaults."""
    return Supplier(
        id=id,
        name=name,
        category=category,
        location=location,
        price_from=price_from,
        rating=rating,
        themes=themes,
        description=kwargs.get("description", ""),
        review_count=kwargs.get("review_count", 0),
        service_themes=kwargs.get("service_themes", []),
        service_type=kwargs.get("service_type"),
        is_premium=kwargs.get("is_premium", False),
        avg_response_time=kwargs.get("avg_response_time"),
        availability=kwargs.get("availability", []),
    )


def make_brief(
    theme: str = "princess",
    guest_count: int = 10,
    budget: float | None = 500,
    party_date: date | None = PARTY_DAY,
    time_slot: str = "afternoon",
    location: str = "W3 7QD",
    **kwargs,
) -> PartyBrief:
    """Factory for PartyBrief with sensible defaults."""
    return PartyBrief(
        theme=theme,
        guest_count=guest_count,
        budget=budget,
        party_date=party_date,
        time_slot=time_slot,
        location=location,
        duration=kwargs.get("duration", 2.0),
        child_age=kwargs.get("child_age"),
    )


# ---------------------------------------------------------------------------
# Fake Catalog
# ---------------------------------------------------------------------------


class FakeCatalog(CatalogPort):
    """In-memory CatalogPort that records how often it was queried.

    Usage:
        catalog = FakeCatalog([make_supplier()])
        suppliers = await catalog.get_all_suppliers()
    """

    def __init__(self, suppliers: list[Supplier] | None = None):
        self._suppliers = list(suppliers or [])
        self.calls = 0
        self._fail = False

    def fail(self) -> None:
        """Make every query raise."""
        self._fail = True

    async def get_all_suppliers(self) -> list[Supplier]:
        self.calls += 1
        if self._fail:
            raise RuntimeError("Fake catalog configured to fail")
        return list(self._suppliers)
