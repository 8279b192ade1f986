"""Selection results, assembled party plans and replacement proposals."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from partyplan.matching.models.supplier import Supplier

# Reasons returned by CategorySelector.select
NO_SUPPLIERS_FOUND = "no-suppliers-found"
NO_SUPPLIERS_IN_BUDGET = "no-suppliers-in-budget"
BEST_AVAILABLE_MATCH = "best-available-match"
BEST_FALLBACK_MATCH = "best-fallback-match"

STATUS_PENDING = "pending"
STATUS_NEEDS_CONFIRMATION = "needs_confirmation"

# Plan slot keys, in the order they are presented.
PLAN_CATEGORIES: tuple[str, ...] = (
    "venue",
    "entertainment",
    "cakes",
    "catering",
    "facePainting",
    "activities",
    "partyBags",
    "decorations",
    "balloons",
    "softPlay",
)


class SelectionResult(BaseModel):
    """A scored candidate chosen for one category."""

    supplier: Supplier
    composite_score: float
    is_available: bool
    can_serve_location: bool
    is_fallback_selection: bool = False
    availability_reason: str = ""
    location_reason: str = ""


class CategorySelection(BaseModel):
    """Outcome of running the selector over one category's candidates."""

    category: str
    result: SelectionResult | None = None
    reason: str
    requires_confirmation: bool = False

    @property
    def supplier(self) -> Supplier | None:
        return self.result.supplier if self.result else None


class PlanItem(BaseModel):
    """One filled slot of a party plan, shaped for the persistence collaborator."""

    id: str
    name: str
    description: str = ""
    price: float = 0.0
    status: str = STATUS_PENDING
    category: str
    price_unit: str = "per event"
    image: str = ""
    original_supplier: Supplier | None = None
    is_fallback_selection: bool = False

    @classmethod
    def from_selection(cls, result: SelectionResult) -> "PlanItem":
        supplier = result.supplier
        return cls(
            id=supplier.id,
            name=supplier.name,
            description=supplier.description,
            price=supplier.price_from,
            status=(
                STATUS_NEEDS_CONFIRMATION
                if result.is_fallback_selection
                else STATUS_PENDING
            ),
            category=supplier.category.value,
            price_unit=supplier.price_unit,
            image=supplier.image,
            original_supplier=supplier,
            is_fallback_selection=result.is_fallback_selection,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "status": self.status,
            "image": self.image,
            "category": self.category,
            "priceUnit": self.price_unit,
            "originalSupplier": (
                self.original_supplier.model_dump(mode="json")
                if self.original_supplier
                else None
            ),
            "isFallbackSelection": self.is_fallback_selection,
        }


def _einvites_item() -> PlanItem:
    return PlanItem(
        id="digital-invites",
        name="Digital Themed Invites",
        description="Themed e-invitations with RSVP tracking",
        price=25.0,
        status="confirmed",
        category="Digital Services",
        price_unit="per set",
        image="/placeholder.jpg",
    )


class PartyPlan(BaseModel):
    """Category → plan item (or None), plus the fixed e-invites line."""

    slots: dict[str, PlanItem | None] = Field(
        default_factory=lambda: {key: None for key in PLAN_CATEGORIES}
    )
    einvites: PlanItem = Field(default_factory=_einvites_item)
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def get(self, category: str) -> PlanItem | None:
        return self.slots.get(category)

    @property
    def selected(self) -> dict[str, PlanItem]:
        return {key: item for key, item in self.slots.items() if item is not None}

    @property
    def total_cost(self) -> float:
        """Sum of the selected suppliers' starting prices."""
        return sum(item.price for item in self.selected.values())

    @property
    def grand_total(self) -> float:
        return self.total_cost + self.einvites.price

    @property
    def needs_confirmation(self) -> list[str]:
        return [
            key for key, item in self.selected.items() if item.is_fallback_selection
        ]

    def to_record(self) -> dict[str, Any]:
        """Serialise to the camelCase document stored by the persistence layer."""
        record: dict[str, Any] = {
            key: (item.to_record() if item else None) for key, item in self.slots.items()
        }
        record["einvites"] = self.einvites.to_record()
        record["addons"] = []
        return record


# ---------------------------------------------------------------------------
# Replacement
# ---------------------------------------------------------------------------


class SupplierSummary(BaseModel):
    """The slice of a supplier shown on a replacement card."""

    id: str
    name: str
    price: float
    rating: float
    review_count: int = 0
    image: str = ""
    description: str = ""

    @classmethod
    def of(cls, supplier: Supplier, default_rating: float) -> "SupplierSummary":
        return cls(
            id=supplier.id,
            name=supplier.name,
            price=supplier.price_from,
            rating=supplier.rating if supplier.rating is not None else default_rating,
            review_count=supplier.review_count,
            image=supplier.image,
            description=supplier.description,
        )


class RankedAlternative(BaseModel):
    supplier: Supplier
    score: float


def _replacement_id() -> str:
    millis = int(datetime.now(timezone.utc).timestamp() * 1000)
    return f"replacement-{millis}"


class Replacement(BaseModel):
    """A recommended substitute for a rejected supplier, awaiting approval."""

    id: str = Field(default_factory=_replacement_id)
    category: str
    status: str = "pending_approval"
    reason: str
    old_supplier: SupplierSummary
    new_supplier: SupplierSummary
    improvements: list[str] = Field(default_factory=list)
    auto_approved: bool = False
    score: float = 0.0
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_record(self) -> dict[str, Any]:
        def _summary(s: SupplierSummary) -> dict[str, Any]:
            return {
                "id": s.id,
                "name": s.name,
                "price": s.price,
                "rating": s.rating,
                "reviewCount": s.review_count,
                "image": s.image,
                "description": s.description,
            }

        return {
            "id": self.id,
            "category": self.category,
            "status": self.status,
            "reason": self.reason,
            "oldSupplier": _summary(self.old_supplier),
            "newSupplier": _summary(self.new_supplier),
            "improvements": list(self.improvements),
            "autoApproved": self.auto_approved,
            "createdAt": self.created_at,
        }
