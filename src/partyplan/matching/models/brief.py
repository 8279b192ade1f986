"""The caller-supplied party brief."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from partyplan.matching.models.supplier import TimeSlot

NO_THEME = "no-theme"

# Guest-count ceilings → default budget (GBP) when the brief carries none.
_DEFAULT_BUDGET_STEPS: list[tuple[int, float]] = [
    (5, 400.0),
    (10, 500.0),
    (15, 600.0),
    (20, 700.0),
    (25, 800.0),
]
_LARGEST_DEFAULT_BUDGET = 900.0

_TIME_WINDOWS: dict[TimeSlot, dict[str, str]] = {
    TimeSlot.MORNING: {"start": "10:00", "end": "13:00", "label": "10am-1pm"},
    TimeSlot.AFTERNOON: {"start": "13:00", "end": "17:00", "label": "1pm-4pm"},
}
_SLOT_START_TIMES = {TimeSlot.MORNING: "11:00", TimeSlot.AFTERNOON: "14:00"}
_SLOT_DISPLAY = {
    TimeSlot.MORNING: "Morning Party",
    TimeSlot.AFTERNOON: "Afternoon Party",
}


def default_budget_for_guests(guest_count: int) -> float:
    """Step-function budget used when the brief does not state one."""
    for ceiling, budget in _DEFAULT_BUDGET_STEPS:
        if guest_count <= ceiling:
            return budget
    return _LARGEST_DEFAULT_BUDGET


def format_duration(duration: float | None) -> str:
    """Render a duration in hours the way it is shown to parents.

    ``2`` → ``"2 hours"``, ``2.5`` → ``"2½ hours"``, ``2.25`` → ``"2h 15m"``.
    """
    if not duration:
        return "2 hours"
    if duration == int(duration):
        return f"{int(duration)} hours"
    hours = int(duration)
    minutes = round((duration - hours) * 60)
    if minutes == 30:
        return f"{hours}½ hours"
    return f"{hours}h {minutes}m"


class PartyBrief(BaseModel):
    """Party requirements submitted by a parent.

    Accepts both snake_case and the camelCase keys used by stored party records
    (``guestCount``, ``timeSlot``).  A legacy ``time`` value ("14:00") is folded
    into ``time_slot`` when no slot is given.
    """

    model_config = ConfigDict(populate_by_name=True)

    theme: str = Field(NO_THEME, description="ThemeCatalog id or 'no-theme'.")
    guest_count: int = Field(..., gt=0, alias="guestCount")
    party_date: date | None = Field(None, alias="date")
    time_slot: TimeSlot = Field(TimeSlot.AFTERNOON, alias="timeSlot")
    duration: float = Field(2.0, gt=0, description="Party length in hours.")
    location: str = Field("", description="Postcode or venue address.")
    budget: float | None = Field(None, description="Total budget in GBP.")
    child_age: int | None = Field(None, alias="childAge")

    @model_validator(mode="before")
    @classmethod
    def _fold_legacy_time(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if data.get("timeSlot") or data.get("time_slot"):
            return data
        legacy_time = data.get("time")
        if isinstance(legacy_time, str) and ":" in legacy_time:
            try:
                hour = int(legacy_time.split(":")[0])
            except ValueError:
                return data
            data = dict(data)
            data["time_slot"] = TimeSlot.MORNING if hour < 13 else TimeSlot.AFTERNOON
        return data

    @property
    def effective_budget(self) -> float:
        """The stated budget, or the guest-count default when absent or non-positive."""
        if self.budget and self.budget > 0:
            return self.budget
        return default_budget_for_guests(self.guest_count)

    @property
    def time_window(self) -> dict[str, str]:
        return _TIME_WINDOWS[self.time_slot]

    @property
    def start_time(self) -> str:
        return _SLOT_START_TIMES[self.time_slot]

    @property
    def display_time_slot(self) -> str:
        return _SLOT_DISPLAY[self.time_slot]

    @property
    def display_duration(self) -> str:
        return format_duration(self.duration)
