"""Supplier catalog ports and adapters.

The engine never reads the catalog itself: a :class:`CatalogPort` is queried
once at the start of a planning run and the resulting snapshot is passed
into the (synchronous) selection code.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Any

import httpx

from partyplan import logger
from partyplan.matching.config import CatalogConfig, load_catalog_config
from partyplan.matching.models.supplier import (
    BusyDates,
    DateEntry,
    DaySchedule,
    GenericSlots,
    Supplier,
    SupplierCategory,
    UnavailableDates,
    WorkingHours,
)

ENTERTAINMENT_SERVICE_TYPES = frozenset(
    {"entertainer", "magician", "clown", "dj", "musician"}
)


class CatalogPort(ABC):
    @abstractmethod
    async def get_all_suppliers(self) -> list[Supplier]:
        """Return every supplier in the catalog."""
        ...

    async def get_entertainment_by_theme(self, theme: str) -> list[Supplier]:
        """Return entertainment suppliers that match the theme."""
        return entertainment_by_theme(await self.get_all_suppliers(), theme)


class InMemoryCatalog(CatalogPort):
    """Catalog over an already-loaded supplier list."""

    def __init__(self, suppliers: list[Supplier]) -> None:
        self._suppliers = list(suppliers)

    async def get_all_suppliers(self) -> list[Supplier]:
        return list(self._suppliers)


class JsonFileCatalog(CatalogPort):
    """Reads supplier records from a JSON file on disk."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    async def get_all_suppliers(self) -> list[Supplier]:
        text = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        return parse_catalog(json.loads(text))


class HttpCatalogAdapter(CatalogPort):
    """Fetches supplier records from an HTTP endpoint returning catalog JSON."""

    def __init__(self, url: str, timeout: float = 15) -> None:
        self._url = url
        self._timeout = timeout

    async def get_all_suppliers(self) -> list[Supplier]:
        """Fetch and parse the catalog.

        Retries up to 3 times on transient errors with exponential backoff.
        """
        max_retries = 3
        for attempt in range(max_retries):
            try:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.get(self._url)
                    resp.raise_for_status()
                return parse_catalog(resp.json())
            except (httpx.HTTPError, asyncio.TimeoutError):
                if attempt == max_retries - 1:
                    raise
                await asyncio.sleep(2**attempt)

        raise RuntimeError("Unreachable: retry loop exhausted without raising")


def create_catalog(config: CatalogConfig | None = None) -> CatalogPort:
    """Build the adapter for the configured catalog source (file wins over URL).

    Raises:
        ValueError: If neither a file nor a URL is configured.
    """
    config = config or load_catalog_config()
    if config.file:
        return JsonFileCatalog(config.file)
    if config.url:
        return HttpCatalogAdapter(config.url)
    raise ValueError(
        "No supplier catalog configured. Pass --catalog, set PARTYPLAN_CATALOG_FILE "
        "or PARTYPLAN_CATALOG_URL, or add it to ~/.partyplan/config.toml:\n\n"
        "    [catalog]\n"
        '    file = "/path/to/catalog.json"\n'
    )


# ---------------------------------------------------------------------------
# Theme matching for entertainment
# ---------------------------------------------------------------------------


def is_entertainment(supplier: Supplier) -> bool:
    return (
        supplier.category == SupplierCategory.ENTERTAINMENT
        or (supplier.service_type or "").lower() in ENTERTAINMENT_SERVICE_TYPES
    )


def matches_theme(supplier: Supplier, theme: str) -> bool:
    """Theme match on tags, service type, name or description, plus theme aliases."""
    themes = supplier.themes or []
    name = supplier.name.lower()
    service_type = (supplier.service_type or "").lower()
    lowered = (theme or "").lower()

    if theme in themes or service_type == lowered:
        return True
    if lowered and (lowered in name or lowered in supplier.description.lower()):
        return True

    if theme == "spiderman":
        return "superhero" in themes or "spider" in name or "superhero" in name
    if theme == "princess":
        return "fairy" in themes or "princess" in name
    if theme == "taylor-swift":
        return service_type in ("musician", "dj") or "music" in themes
    if theme == "pokemon":
        return service_type == "pokemon" or "pokemon" in themes
    return False


def entertainment_by_theme(suppliers: list[Supplier], theme: str) -> list[Supplier]:
    """Themed entertainment from an already-fetched snapshot, in catalog order."""
    return [s for s in suppliers if is_entertainment(s) and matches_theme(s, theme)]


# ---------------------------------------------------------------------------
# Record parsing
# ---------------------------------------------------------------------------


def _parse_day(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _parse_date_entries(raw: list) -> list[DateEntry]:
    entries = []
    for item in raw:
        if isinstance(item, dict):
            slots = item.get("timeSlots")
            entries.append(
                DateEntry(
                    day=_parse_day(item["date"]),
                    time_slots=list(slots) if slots else None,
                )
            )
        else:
            entries.append(DateEntry(day=_parse_day(item)))
    return entries


def _parse_working_hours(raw: dict) -> WorkingHours:
    days: dict[str, DaySchedule] = {}
    for day_name, value in raw.items():
        key = str(day_name).lower()
        if value is False:
            days[key] = DaySchedule(active=False)
            continue
        if not isinstance(value, dict):
            continue
        active = value.get("active", value.get("enabled", True))
        slots: dict[str, bool] = {}
        for slot, slot_value in (value.get("timeSlots") or {}).items():
            if isinstance(slot_value, dict):
                slots[slot] = bool(slot_value.get("available", True))
            else:
                slots[slot] = bool(slot_value)
        days[key] = DaySchedule(active=bool(active), time_slots=slots)
    return WorkingHours(days=days)


def _parse_generic(raw: dict) -> GenericSlots:
    return GenericSlots(
        time_slots=list(raw["timeSlots"]) if raw.get("timeSlots") else None,
        blocked_dates=[_parse_day(d) for d in raw.get("blockedDates") or []],
    )


_AVAILABILITY_PARSERS = (
    ("workingHours", dict, _parse_working_hours),
    ("unavailableDates", list, lambda raw: UnavailableDates(entries=_parse_date_entries(raw))),
    ("busyDates", list, lambda raw: BusyDates(entries=_parse_date_entries(raw))),
)


def _parse_availability(record: dict, supplier_id: str) -> list:
    """Decide which availability representations a record carries.

    A malformed field is dropped with a warning; the remaining ones are kept.
    """
    specs: list = []
    for key, expected, parser in _AVAILABILITY_PARSERS:
        raw = record.get(key)
        if not raw or not isinstance(raw, expected):
            continue
        try:
            specs.append(parser(raw))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Supplier {supplier_id}: ignoring malformed {key}: {e}")

    generic = record.get("availability")
    if isinstance(generic, dict) and (
        generic.get("timeSlots") or generic.get("blockedDates")
    ):
        try:
            specs.append(_parse_generic(generic))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Supplier {supplier_id}: ignoring malformed availability: {e}")
    return specs


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def parse_supplier(record: dict) -> Supplier:
    """Map one raw catalog record (camelCase) to the normalized Supplier model.

    Records stored by the document store wrap their fields in a ``data``
    envelope; those are unwrapped first.

    Raises:
        KeyError, ValueError: If the record lacks an id or has an unknown
            category or non-numeric price.
    """
    data = record.get("data")
    if isinstance(data, dict):
        record = {
            **data,
            "id": record.get("legacy_id") or record.get("id") or data.get("id"),
            "name": data.get("name") or record.get("business_name") or "",
        }

    supplier_id = str(record["id"])
    service_details = record.get("serviceDetails") or {}
    themes = record.get("themes")

    return Supplier(
        id=supplier_id,
        name=record.get("name") or record.get("businessName") or "",
        category=SupplierCategory.from_label(record.get("category", "")),
        location=record.get("location") or "",
        price_from=float(record.get("priceFrom") or record.get("price") or 0),
        price_unit=record.get("priceUnit") or "per event",
        description=record.get("description") or "",
        rating=_optional_float(record.get("rating")),
        review_count=int(record.get("reviewCount") or 0),
        themes=list(themes) if isinstance(themes, list) else None,
        service_themes=list(service_details.get("themes") or []),
        service_type=record.get("serviceType"),
        is_premium=bool(record.get("isPremium", False)),
        avg_response_time=_optional_float(record.get("avgResponseTime")),
        image=record.get("image") or "",
        availability=_parse_availability(record, supplier_id),
    )


def parse_catalog(payload: Any) -> list[Supplier]:
    """Parse a catalog payload (a list, or ``{"suppliers": [...]}``).

    Records that cannot be parsed are skipped with a warning.
    """
    records = payload.get("suppliers", []) if isinstance(payload, dict) else payload
    suppliers: list[Supplier] = []
    for record in records or []:
        if not isinstance(record, dict):
            continue
        try:
            suppliers.append(parse_supplier(record))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping catalog record {record.get('id')!r}: {e}")
    logger.debug(f"Parsed {len(suppliers)} suppliers from catalog payload")
    return suppliers
