"""Supplier catalog entries and their availability representations."""

from datetime import date
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class SupplierCategory(str, Enum):
    """Closed set of catalog categories a supplier can be listed under."""

    VENUES = "Venues"
    ENTERTAINMENT = "Entertainment"
    CATERING = "Catering"
    CAKES = "Cakes"
    DECORATIONS = "Decorations"
    ACTIVITIES = "Activities"
    PARTY_BAGS = "Party Bags"
    PHOTOGRAPHY = "Photography"
    FACE_PAINTING = "Face Painting"
    BALLOONS = "Balloons"

    @classmethod
    def from_label(cls, label: str) -> "SupplierCategory":
        """Resolve a catalog label case-insensitively (``"party bags"`` → PARTY_BAGS).

        Raises:
            ValueError: If the label names no known category.
        """
        cleaned = (label or "").strip().lower()
        for member in cls:
            if member.value.lower() == cleaned:
                return member
        raise ValueError(f"Unknown supplier category: {label!r}")


class TimeSlot(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"


# ---------------------------------------------------------------------------
# Availability representations
# ---------------------------------------------------------------------------


class DaySchedule(BaseModel):
    """One weekday row of a working-hours table."""

    active: bool = Field(True, description="Whether the supplier works this day.")
    time_slots: dict[str, bool] = Field(
        default_factory=dict,
        description="Slot name → bookable flag. Slots not listed are treated as open.",
    )


class DateEntry(BaseModel):
    """A blocked or busy date, optionally narrowed to specific time slots."""

    day: date
    time_slots: list[str] | None = Field(
        None, description="Slots affected on this date; None means the whole day."
    )


class WorkingHours(BaseModel):
    kind: Literal["working_hours"] = "working_hours"
    days: dict[str, DaySchedule] = Field(
        default_factory=dict, description="Lowercase weekday name → schedule."
    )


class UnavailableDates(BaseModel):
    kind: Literal["unavailable_dates"] = "unavailable_dates"
    entries: list[DateEntry] = Field(default_factory=list)


class BusyDates(BaseModel):
    kind: Literal["busy_dates"] = "busy_dates"
    entries: list[DateEntry] = Field(default_factory=list)


class GenericSlots(BaseModel):
    kind: Literal["generic"] = "generic"
    time_slots: list[str] | None = Field(
        None, description="Supported slots; None or empty means unrestricted."
    )
    blocked_dates: list[date] = Field(default_factory=list)


AvailabilitySpec = Annotated[
    Union[WorkingHours, UnavailableDates, BusyDates, GenericSlots],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Supplier
# ---------------------------------------------------------------------------


class Supplier(BaseModel):
    """A normalized, immutable catalog entry.

    Built once by the catalog adapters from raw camelCase records; the
    availability representations present on the record are decided at that
    point so the engine only ever sees the closed ``AvailabilitySpec`` variants.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque supplier identifier.")
    name: str = Field("", description="Display name.")
    category: SupplierCategory
    location: str = Field("", description="Postcode or free-text location.")
    price_from: float = Field(0.0, ge=0, description="Starting price in GBP.")
    price_unit: str = Field("per event", description="Display-only price unit.")
    description: str = ""
    rating: float | None = Field(None, ge=0, le=5)
    review_count: int = 0
    themes: list[str] | None = Field(
        None, description="Theme identifiers; None when the record carries none."
    )
    service_themes: list[str] = Field(
        default_factory=list,
        description="Themes declared in the record's service details.",
    )
    service_type: str | None = Field(
        None, description="Free-form service type (e.g. 'magician', 'dj')."
    )
    is_premium: bool = False
    avg_response_time: float | None = Field(
        None, description="Average enquiry response time in hours."
    )
    image: str = ""
    availability: list[AvailabilitySpec] = Field(default_factory=list)

    @property
    def has_availability_data(self) -> bool:
        return bool(self.availability)

    def availability_of(self, kind: type) -> list:
        """Return the availability representations of the given variant type."""
        return [spec for spec in self.availability if isinstance(spec, kind)]
