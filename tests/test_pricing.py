"""Tests for hour slot price resolution."""
import pytest
from demand_shift.core.errors import InvalidHourSlotError, NoPriceDataError
from demand_shift.core.pricing import (
    cheapest_entry,
    find_price_entry_for_slot,
    find_price_for_slot,
    range_contains,
    slot_start_hour,
)
from demand_shift.core.schemas import PriceEntry


def _naive_lookup(hour, prices):
    for p in prices:
        start = int(p.hour_range[:2])
        end = int(p.hour_range[6:8])
        covered = [h % 24 for h in range(start, end if start <= end else end + 24)]
        if hour in covered:
            return p.unit_price
    return prices[0].unit_price


class TestSlotParsing:

    def test_slot_start_hour(self):
        assert slot_start_hour("08:00-09:00") == 8
        assert slot_start_hour(" 23:00-00:00") == 23
        assert slot_start_hour("00:00-01:00") == 0

    @pytest.mark.parametrize("slot", ["", "ab:00-01:00", "24:00-01:00", "-5:00-01:00"])
    def test_invalid_slot_raises(self, slot):
        with pytest.raises(InvalidHourSlotError):
            slot_start_hour(slot)

    def test_invalid_error_is_value_error(self):
        with pytest.raises(ValueError):
            slot_start_hour("noon")


class TestRangeMatching:

    def test_midnight_wrap_matches_late_and_early_hours_only(self):
        matched = [h for h in range(24) if range_contains("22:00-06:00", h)]
        assert matched == [0, 1, 2, 3, 4, 5, 22, 23]

    def test_plain_range_is_half_open(self):
        assert range_contains("08:00-09:00", 8)
        assert not range_contains("08:00-09:00", 9)
        assert not range_contains("08:00-09:00", 7)


class TestFindPrice:

    def test_full_coverage_matches_naive_scan(self, day_prices):
        for hour in range(24):
            slot = f"{hour:02d}:00-{(hour + 1) % 24:02d}:00"
            assert find_price_for_slot(slot, day_prices) == _naive_lookup(hour, day_prices)

    def test_wrapping_range_prices_night_slots(self, day_prices):
        assert find_price_for_slot("23:00-00:00", day_prices) == 1.25
        assert find_price_for_slot("02:00-03:00", day_prices) == 1.25
        assert find_price_for_slot("18:00-19:00", day_prices) == 3.20

    def test_first_match_wins(self):
        prices = [PriceEntry("08:00-12:00", 2.0), PriceEntry("08:00-09:00", 5.0)]
        assert find_price_for_slot("08:00-09:00", prices) == 2.0

    def test_uncovered_slot_falls_back_to_first_entry(self):
        prices = [PriceEntry("08:00-09:00", 2.10), PriceEntry("02:00-03:00", 1.25)]
        entry = find_price_entry_for_slot("15:00-16:00", prices)
        assert entry is prices[0]

    def test_empty_prices_raise(self):
        with pytest.raises(NoPriceDataError):
            find_price_for_slot("08:00-09:00", [])


class TestCheapestEntry:

    def test_lowest_price_selected(self, day_prices):
        assert cheapest_entry(day_prices).hour_range == "22:00-06:00"

    def test_tie_goes_to_first_occurrence(self):
        prices = [PriceEntry("01:00-02:00", 1.0), PriceEntry("03:00-04:00", 1.0)]
        assert cheapest_entry(prices).hour_range == "01:00-02:00"

    def test_empty_raises(self):
        with pytest.raises(NoPriceDataError):
            cheapest_entry([])
