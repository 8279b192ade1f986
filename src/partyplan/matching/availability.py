"""Supplier availability checks against a party date and time slot."""

from datetime import date

from pydantic import BaseModel

from partyplan import logger
from partyplan.matching.models.supplier import (
    BusyDates,
    DateEntry,
    GenericSlots,
    Supplier,
    TimeSlot,
    UnavailableDates,
    WorkingHours,
)

CONFIDENCE_LOW = "low"
CONFIDENCE_MEDIUM = "medium"
CONFIDENCE_HIGH = "high"

_WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class AvailabilityCheck(BaseModel):
    available: bool
    reason: str
    confidence: str = CONFIDENCE_HIGH


def _coerce_date(value: date | str | None) -> date | None:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _slot_name(time_slot: TimeSlot | str) -> str:
    return time_slot.value if isinstance(time_slot, TimeSlot) else str(time_slot)


def _match_entries(entries: list[DateEntry], day: date, slot: str) -> str | None:
    """Return ``"date"`` or ``"time-slot"`` for the first entry blocking the request."""
    for entry in entries:
        if entry.day != day:
            continue
        if entry.time_slots is None:
            return "date"
        if slot in entry.time_slots:
            return "time-slot"
    return None


class AvailabilityOracle:
    """Answers "can this supplier be booked for this date and slot?".

    Rules are applied in a fixed order and the first decisive one wins:
    working hours, unavailable dates, busy dates, then the generic
    ``{timeSlots, blockedDates}`` object.  Evaluation fails open; any internal
    error yields an optimistic, low-confidence answer instead of raising.
    """

    def check(
        self,
        supplier: Supplier,
        party_date: date | str | None,
        time_slot: TimeSlot | str,
    ) -> AvailabilityCheck:
        try:
            return self._check(supplier, _coerce_date(party_date), _slot_name(time_slot))
        except Exception as e:
            supplier_id = getattr(supplier, "id", "?")
            logger.warning(f"Availability check failed for {supplier_id}: {e}")
            return AvailabilityCheck(
                available=True, reason="error-default", confidence=CONFIDENCE_LOW
            )

    def _check(self, supplier: Supplier, day: date | None, slot: str) -> AvailabilityCheck:
        if not supplier.has_availability_data:
            return AvailabilityCheck(
                available=True,
                reason="no-availability-data",
                confidence=CONFIDENCE_MEDIUM,
            )

        if day is not None:
            weekday = _WEEKDAYS[day.weekday()]
            for hours in supplier.availability_of(WorkingHours):
                schedule = hours.days.get(weekday)
                if schedule is None:
                    continue
                if not schedule.active:
                    return AvailabilityCheck(available=False, reason="closed-day")
                if schedule.time_slots.get(slot) is False:
                    return AvailabilityCheck(
                        available=False, reason="time-slot-unavailable"
                    )

            for blocked in supplier.availability_of(UnavailableDates):
                hit = _match_entries(blocked.entries, day, slot)
                if hit:
                    return AvailabilityCheck(available=False, reason=f"{hit}-blocked")

            for busy in supplier.availability_of(BusyDates):
                hit = _match_entries(busy.entries, day, slot)
                if hit:
                    return AvailabilityCheck(available=False, reason=f"{hit}-busy")

        for generic in supplier.availability_of(GenericSlots):
            if generic.time_slots and slot not in generic.time_slots:
                return AvailabilityCheck(
                    available=False, reason="time-slot-not-supported"
                )
            if day is not None and day in generic.blocked_dates:
                return AvailabilityCheck(available=False, reason="date-in-blocked-list")

        return AvailabilityCheck(available=True, reason="available")
