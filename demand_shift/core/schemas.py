from dataclasses import dataclass, asdict
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class DemandRecord:
    id: str
    company_id: str
    user_id: str
    hour_slot: str  # "HH:MM-HH:MM"
    demand_kwh: float
    demand_date: Optional[date] = None
    status: str = "pending"


@dataclass(frozen=True)
class PriceEntry:
    hour_range: str  # "HH:MM-HH:MM", may wrap past midnight
    unit_price: float  # currency per kWh
    period_type: str = "normal"  # peak / normal / off-peak
    effective_date: Optional[date] = None


@dataclass
class CandidateRecommendation:
    company_id: str
    user_id: str
    original_hour: str
    recommended_hour: str
    original_load_kwh: float
    potential_savings: float
    co2_reduction_kg: float
    reason: str
    status: str = "pending"

    def to_dict(self) -> dict:
        return asdict(self)
