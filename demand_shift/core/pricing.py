"""
Time-of-day price lookup for hour slots.

Price ranges are half-open "HH:MM-HH:MM" intervals on the hour. A range whose
start hour is after its end hour wraps past midnight (e.g. "22:00-06:00").
"""
import logging
from typing import Sequence

from demand_shift.core.errors import InvalidHourSlotError, NoPriceDataError
from demand_shift.core.schemas import PriceEntry

logger = logging.getLogger(__name__)


def _parse_hour(value: str, source: str) -> int:
    try:
        hour = int(value.strip().split(":")[0])
    except (ValueError, AttributeError):
        raise InvalidHourSlotError(f"Unable to parse hour from {source!r}")
    if not 0 <= hour <= 24:
        raise InvalidHourSlotError(f"Hour out of range in {source!r}")
    return hour


def slot_start_hour(hour_slot: str) -> int:
    """Return the start hour (0-23) of a "HH:MM-HH:MM" slot."""
    hour = _parse_hour(hour_slot.split("-")[0], hour_slot)
    if hour > 23:
        raise InvalidHourSlotError(f"Slot cannot start at hour 24: {hour_slot!r}")
    return hour


def range_hours(hour_range: str) -> tuple[int, int]:
    parts = hour_range.split("-")
    if len(parts) != 2:
        raise InvalidHourSlotError(f"Expected 'HH:MM-HH:MM', got {hour_range!r}")
    return _parse_hour(parts[0], hour_range), _parse_hour(parts[1], hour_range)


def range_contains(hour_range: str, hour: int) -> bool:
    start, end = range_hours(hour_range)
    if start <= end:
        return start <= hour < end
    # wraps past midnight
    return hour >= start or hour < end


def find_price_entry_for_slot(hour_slot: str, prices: Sequence[PriceEntry]) -> PriceEntry:
    """Return the first price entry whose range contains the slot's start hour.

    Falls back to the first entry when no range covers the slot.
    """
    if not prices:
        raise NoPriceDataError("No price entries available to price the slot")

    hour = slot_start_hour(hour_slot)
    for entry in prices:
        if range_contains(entry.hour_range, hour):
            return entry

    logger.debug("No price range covers %s, falling back to %s", hour_slot, prices[0].hour_range)
    return prices[0]


def find_price_for_slot(hour_slot: str, prices: Sequence[PriceEntry]) -> float:
    return float(find_price_entry_for_slot(hour_slot, prices).unit_price)


def cheapest_entry(prices: Sequence[PriceEntry]) -> PriceEntry:
    """Entry with the lowest unit price; earlier entries win ties."""
    if not prices:
        raise NoPriceDataError("No price entries available")
    best = prices[0]
    for entry in prices[1:]:
        if entry.unit_price < best.unit_price:
            best = entry
    return best
