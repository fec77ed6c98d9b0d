"""
Demand shift recommendation generator.

For every demand record the current unit price of its slot is compared with the
cheapest slot of the day. Moving the whole load to the cheapest slot is proposed
when that saves more than the configured threshold.
"""
import logging
from typing import Iterable, Optional, Sequence

from demand_shift.core.config import CO2_KG_PER_KWH, MIN_SHIFT_SAVINGS
from demand_shift.core.errors import InvalidHourSlotError
from demand_shift.core.pricing import cheapest_entry, find_price_for_slot
from demand_shift.core.schemas import CandidateRecommendation, DemandRecord, PriceEntry

logger = logging.getLogger(__name__)


def format_reason(hour_slot: str, demand_kwh: float, recommended_hour: str, savings: float) -> str:
    return (
        f"Shift {demand_kwh:g} kWh from {hour_slot} to {recommended_hour} "
        f"and save {savings:.2f}."
    )


def generate(
    demands: Iterable[DemandRecord],
    prices: Sequence[PriceEntry],
    company_id: Optional[str] = None,
    user_id: Optional[str] = None,
    co2_factor: float = CO2_KG_PER_KWH,
    savings_threshold: float = MIN_SHIFT_SAVINGS,
) -> list[CandidateRecommendation]:
    """Build candidate recommendations for a set of demand records.

    Args:
        demands: canonical demand records (hour slot + kWh)
        prices: today's price table, in the order it should be scanned
        company_id, user_id: tag candidates with these ids instead of the record's own
        co2_factor: kg CO2 credited per kWh shifted
        savings_threshold: savings must be strictly greater than this

    Returns:
        Candidates in the order of the input demands. Empty when there is
        nothing to price or nothing worth shifting. Records whose hour slot
        cannot be parsed are logged and skipped.
    """
    demands = list(demands)
    if not demands or not prices:
        return []

    target = cheapest_entry(prices)
    target_price = float(target.unit_price)
    candidates = []

    for demand in demands:
        kwh = float(demand.demand_kwh)
        try:
            current_price = find_price_for_slot(demand.hour_slot, prices)
        except InvalidHourSlotError as e:
            logger.warning("Skipping demand %s: %s", demand.id, e)
            continue

        current_cost = kwh * current_price
        recommended_cost = kwh * target_price
        savings = current_cost - recommended_cost
        co2_reduction = kwh * co2_factor

        if savings <= savings_threshold or target.hour_range == demand.hour_slot:
            continue

        candidates.append(
            CandidateRecommendation(
                company_id=company_id or demand.company_id,
                user_id=user_id or demand.user_id,
                original_hour=demand.hour_slot,
                recommended_hour=target.hour_range,
                original_load_kwh=kwh,
                potential_savings=round(savings, 2),
                co2_reduction_kg=round(co2_reduction, 2),
                reason=format_reason(demand.hour_slot, kwh, target.hour_range, savings),
            )
        )

    logger.debug("Generated %d candidates from %d demand records", len(candidates), len(demands))
    return candidates
