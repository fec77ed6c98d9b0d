"""Demand records for the recommendation engine.

Confirmed demands and requested demands live in separate tables with slightly
different columns. Both are mapped to one `DemandRecord` here so the engine
never sees the difference.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from demand_shift.core.errors import StorageError
from demand_shift.core.schemas import DemandRecord
from demand_shift.models.demand import DemandRequest, ElectricityDemand

logger = logging.getLogger(__name__)


def from_demand(row: ElectricityDemand) -> DemandRecord:
    return DemandRecord(
        id=str(row.id),
        company_id=row.company_id,
        user_id=row.user_id,
        hour_slot=row.hour_slot,
        demand_kwh=float(row.demand_kwh or 0.0),
        demand_date=row.demand_date,
        status=row.status or "pending",
    )


def from_request(row: DemandRequest) -> DemandRecord:
    return DemandRecord(
        id=str(row.id),
        company_id=row.company_id,
        user_id=row.user_id,
        hour_slot=row.hour_slot,
        demand_kwh=float(row.demand_kwh or 0.0),
        demand_date=row.request_date,
        status=row.status or "pending",
    )


def list_demands(session: Session, user_id: str) -> list[DemandRecord]:
    """Return all of a user's confirmed demands, or their requested demands if they have none."""
    try:
        rows = session.scalars(
            select(ElectricityDemand)
            .where(ElectricityDemand.user_id == user_id)
            .order_by(ElectricityDemand.hour_slot)
        ).all()
        if rows:
            return [from_demand(r) for r in rows]

        requests = session.scalars(
            select(DemandRequest)
            .where(DemandRequest.user_id == user_id)
            .order_by(DemandRequest.hour_slot)
        ).all()
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to read demands for user {user_id}: {e}") from e

    if requests:
        logger.debug("No confirmed demands for %s, using %d requested demands", user_id, len(requests))
    return [from_request(r) for r in requests]


def users_with_demands(session: Session) -> list[tuple[str, str]]:
    """Distinct (user_id, company_id) pairs that have any confirmed or requested demand."""
    try:
        confirmed = session.execute(
            select(ElectricityDemand.user_id, ElectricityDemand.company_id).distinct()
        ).all()
        requested = session.execute(
            select(DemandRequest.user_id, DemandRequest.company_id).distinct()
        ).all()
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to list users with demands: {e}") from e
    return sorted({(u, c) for u, c in list(confirmed) + list(requested)})
