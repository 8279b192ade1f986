"""Supplier-to-party location proximity.

Locations arrive as UK postcodes ("W3 7QD"), outward codes ("SW11"), free-text
venue addresses ("The Church, 18 Birkbeck Grove, London, W3 7QD") or coverage
phrases used by catalog entries without a fixed base ("Central London",
"UK Wide").  Classification of those strings sits behind
:class:`LocationClassifier`; the adjacency table is plain data handed to
:class:`LocationProximity`, so either can be swapped for a synthetic geography.

Proximity fails open: whenever distance cannot be evaluated the supplier is
allowed, with a lower confidence the selector scores accordingly.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Mapping

from pydantic import BaseModel

from partyplan import logger
from partyplan.matching.models.supplier import Supplier, SupplierCategory


class RadiusTier(str, Enum):
    """How far a supplier is willing to travel."""

    EXACT = "exact"
    DISTRICT = "district"
    WIDE = "wide"
    ALL = "all"


_TRAVELLING_TIERS = frozenset({RadiusTier.WIDE, RadiusTier.ALL})

# ---------------------------------------------------------------------------
# Adjacency data
# ---------------------------------------------------------------------------

# Postcode area → neighbouring areas.  Lookups check both directions, so an
# entry only needs to appear on one side.
LONDON_ADJACENCY: dict[str, tuple[str, ...]] = {
    # inner London
    "SW": ("SE", "W", "TW", "CR", "SM"),
    "SE": ("SW", "E", "BR", "DA", "TN"),
    "W": ("SW", "NW", "TW", "UB"),
    "E": ("SE", "N", "IG", "RM"),
    "N": ("E", "NW", "EN", "AL"),
    "NW": ("N", "W", "HA", "WD"),
    "EC": ("E", "SE", "SW", "W"),
    "WC": ("SW", "W", "N", "E"),
    # outer London
    "TW": ("SW", "W", "KT", "TN"),
    "CR": ("SW", "SE", "BR", "RH"),
    "BR": ("SE", "CR", "TN", "DA"),
    "HA": ("NW", "UB", "WD"),
    "UB": ("W", "HA", "SL"),
}


def are_areas_adjacent(
    area_a: str | None,
    area_b: str | None,
    adjacency: Mapping[str, tuple[str, ...]] = LONDON_ADJACENCY,
) -> bool:
    """Symmetric adjacency lookup.  Identical areas count as adjacent."""
    if not area_a or not area_b:
        return False
    if area_a == area_b:
        return True
    return area_b in adjacency.get(area_a, ()) or area_a in adjacency.get(area_b, ())


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class LocationClassifier(ABC):
    """Recognises postcodes and coverage phrases inside location strings."""

    @abstractmethod
    def extract_postcode(self, text: str) -> str | None:
        """Pull a postcode out of a free-text address, or None."""
        ...

    @abstractmethod
    def is_descriptive(self, location: str) -> bool:
        """True for coverage phrases that name a region rather than a place."""
        ...

    @abstractmethod
    def is_valid_postcode(self, location: str) -> bool: ...

    @abstractmethod
    def area(self, postcode: str) -> str | None:
        """The postcode area (leading letters), e.g. ``"SW"`` for ``"SW11 1AA"``."""
        ...

    @staticmethod
    def normalize(location: str) -> str:
        return re.sub(r"\s+", "", location).upper()


class UkPostcodeClassifier(LocationClassifier):
    """Regex classifier for UK postcodes and London coverage phrases."""

    _ADDRESS_POSTCODE = re.compile(
        r"([A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2})(?:\s*,?\s*$|$)", re.IGNORECASE
    )
    _FULL_POSTCODE = re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2}$", re.IGNORECASE)
    _OUTWARD_ONLY = re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?$", re.IGNORECASE)
    _AREA = re.compile(r"^([A-Z]{1,2})")

    DESCRIPTIVE_PATTERNS: tuple[re.Pattern[str], ...] = (
        re.compile(r"central london", re.IGNORECASE),
        re.compile(r"london wide", re.IGNORECASE),
        re.compile(r"greater london", re.IGNORECASE),
        re.compile(r"uk wide", re.IGNORECASE),
        re.compile(r"nationwide", re.IGNORECASE),
        re.compile(r"london$", re.IGNORECASE),
        re.compile(r"^london", re.IGNORECASE),
    )

    def extract_postcode(self, text: str) -> str | None:
        if not text:
            return None
        match = self._ADDRESS_POSTCODE.search(text.strip())
        if not match:
            return None
        postcode = self.normalize(match.group(1))
        return f"{postcode[:-3]} {postcode[-3:]}"

    def is_descriptive(self, location: str) -> bool:
        if not location:
            return False
        stripped = location.strip()
        return any(p.search(stripped) for p in self.DESCRIPTIVE_PATTERNS)

    def is_valid_postcode(self, location: str) -> bool:
        if not location:
            return False
        cleaned = self.normalize(location)
        return bool(
            self._FULL_POSTCODE.match(cleaned) or self._OUTWARD_ONLY.match(cleaned)
        )

    def area(self, postcode: str) -> str | None:
        if not postcode:
            return None
        match = self._AREA.match(self.normalize(postcode))
        return match.group(1) if match else None


# ---------------------------------------------------------------------------
# Proximity decision
# ---------------------------------------------------------------------------


class LocationVerdict(BaseModel):
    """Whether a supplier can serve a location, and how sure we are."""

    allowed: bool
    reason: str
    confident: bool = True


def radius_for_supplier(supplier: Supplier) -> RadiusTier:
    """Service radius by category; named entertainers travel wide regardless."""
    if supplier.category == SupplierCategory.VENUES:
        return RadiusTier.EXACT
    if (
        supplier.category == SupplierCategory.ENTERTAINMENT
        or "entertainer" in supplier.name.lower()
    ):
        return RadiusTier.WIDE
    return RadiusTier.DISTRICT


class LocationProximity:
    """Decides whether a supplier location is close enough to a party location."""

    def __init__(
        self,
        classifier: LocationClassifier | None = None,
        adjacency: Mapping[str, tuple[str, ...]] | None = None,
    ) -> None:
        self._classifier = classifier or UkPostcodeClassifier()
        self._adjacency = LONDON_ADJACENCY if adjacency is None else adjacency

    def nearby(
        self,
        supplier_location: str,
        target_location: str,
        radius: RadiusTier | str = RadiusTier.DISTRICT,
    ) -> bool:
        return self.assess(supplier_location, target_location, radius).allowed

    def assess(
        self,
        supplier_location: str,
        target_location: str,
        radius: RadiusTier | str = RadiusTier.DISTRICT,
    ) -> LocationVerdict:
        """Apply the proximity rules in order; the first decisive rule wins.

        Never raises: an unexpected failure is logged and treated as a
        lenient, low-confidence allow.
        """
        try:
            return self._assess(supplier_location, target_location, RadiusTier(radius))
        except Exception as e:
            logger.warning(
                f"Location check failed for {supplier_location!r} → "
                f"{target_location!r}: {e}"
            )
            return LocationVerdict(allowed=True, reason="error-default", confident=False)

    def _resolve(self, location: str) -> str:
        """Swap a comma-separated address for its postcode where one is found."""
        if "," in location:
            extracted = self._classifier.extract_postcode(location)
            if extracted:
                return extracted
        return location

    def _assess(
        self, supplier_location: str, target_location: str, radius: RadiusTier
    ) -> LocationVerdict:
        if not supplier_location or not target_location:
            return LocationVerdict(
                allowed=True, reason="no-location-data", confident=False
            )

        supplier = self._resolve(supplier_location)
        target = self._resolve(target_location)
        c = self._classifier

        # 1. coverage phrases only count for travelling suppliers
        if c.is_descriptive(supplier):
            if radius in _TRAVELLING_TIERS:
                return LocationVerdict(
                    allowed=True, reason="descriptive-coverage", confident=False
                )
            return LocationVerdict(allowed=False, reason="descriptive-deprioritized")

        # 2. distance unknowable
        if not c.is_valid_postcode(target):
            return LocationVerdict(
                allowed=True, reason="target-not-postcode", confident=False
            )

        # 3. supplier unplaceable
        if not c.is_valid_postcode(supplier):
            if radius in _TRAVELLING_TIERS:
                return LocationVerdict(
                    allowed=True, reason="supplier-not-postcode", confident=False
                )
            return LocationVerdict(allowed=False, reason="supplier-not-postcode")

        # 4. both real postcodes
        if c.normalize(supplier) == c.normalize(target):
            return LocationVerdict(allowed=True, reason="exact-match")

        supplier_area = c.area(supplier)
        target_area = c.area(target)
        if supplier_area == target_area:
            return LocationVerdict(allowed=True, reason="same-area")

        if radius == RadiusTier.EXACT:
            return LocationVerdict(allowed=False, reason="outside-exact-radius")

        if are_areas_adjacent(supplier_area, target_area, self._adjacency):
            logger.debug(f"Adjacent areas: {supplier_area} <-> {target_area}")
            return LocationVerdict(allowed=True, reason="adjacent-area")

        logger.debug(f"Too far: {supplier_area} vs {target_area}")
        return LocationVerdict(allowed=False, reason="too-far")
