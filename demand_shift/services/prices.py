from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from demand_shift.core.clock import utc_today
from demand_shift.core.errors import StorageError
from demand_shift.core.schemas import PriceEntry
from demand_shift.models.price import ElectricityPrice


def _to_entry(row: ElectricityPrice) -> PriceEntry:
    return PriceEntry(
        hour_range=row.hour_range,
        unit_price=float(row.unit_price or 0.0),
        period_type=row.period_type,
        effective_date=row.effective_date,
    )


def current_prices(session: Session, today: Optional[date] = None) -> list[PriceEntry]:
    """Return the price table effective today, ordered by hour range."""
    today = today or utc_today()
    stmt = (
        select(ElectricityPrice)
        .where(ElectricityPrice.effective_date == today)
        .order_by(ElectricityPrice.hour_range)
    )
    try:
        rows = session.scalars(stmt).all()
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to read current prices: {e}") from e
    return [_to_entry(r) for r in rows]


def all_prices(session: Session) -> list[PriceEntry]:
    stmt = select(ElectricityPrice).order_by(ElectricityPrice.effective_date, ElectricityPrice.hour_range)
    try:
        rows = session.scalars(stmt).all()
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to read prices: {e}") from e
    return [_to_entry(r) for r in rows]
