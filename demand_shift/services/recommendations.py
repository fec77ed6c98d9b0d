"""
Storage of demand shift recommendations.

Generation can be triggered from several places at once (a user opening the
screen, the nightly job), so writes are deduplicated twice: against the rows
already stored for the day, and by the unique constraint on the table. Losing
the race to the constraint is a normal outcome and yields no new rows.
"""
import logging
import uuid
from datetime import date
from typing import Iterable, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from demand_shift.core.clock import utc_today
from demand_shift.core.config import DUPLICATE_LOAD_TOLERANCE_KWH
from demand_shift.core.errors import NoPriceDataError, NotFoundError, StorageError
from demand_shift.core.recommender import generate
from demand_shift.core.schemas import CandidateRecommendation
from demand_shift.models.recommendation import DemandShiftRecommendation
from demand_shift.services.demands import list_demands
from demand_shift.services.prices import current_prices

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    if getattr(orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    return "unique" in str(orig).lower()


def _same_shift(existing, candidate) -> bool:
    return (
        existing.company_id == candidate.company_id
        and existing.user_id == candidate.user_id
        and existing.original_hour == candidate.original_hour
        and existing.recommended_hour == candidate.recommended_hour
        and abs(float(existing.original_load_kwh) - float(candidate.original_load_kwh)) < DUPLICATE_LOAD_TOLERANCE_KWH
    )


def _existing_for_day(session: Session, user_ids: Sequence[str], day: date) -> list[DemandShiftRecommendation]:
    stmt = select(DemandShiftRecommendation).where(
        DemandShiftRecommendation.user_id.in_(user_ids),
        DemandShiftRecommendation.recommendation_date == day,
    )
    return list(session.scalars(stmt).all())


def _drop_duplicates(candidates: Iterable[CandidateRecommendation], existing: Sequence) -> list[CandidateRecommendation]:
    kept: list[CandidateRecommendation] = []
    for c in candidates:
        if any(_same_shift(e, c) for e in existing) or any(_same_shift(k, c) for k in kept):
            continue
        kept.append(c)
    return kept


def _insert(session: Session, candidates: Sequence[CandidateRecommendation], day: date) -> list[DemandShiftRecommendation]:
    rows = [DemandShiftRecommendation(**c.to_dict(), recommendation_date=day) for c in candidates]
    try:
        session.add_all(rows)
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if _is_unique_violation(e):
            logger.info("Recommendations for %s already written by a concurrent run", day)
            return []
        raise StorageError(f"Failed to store recommendations: {e.orig}") from e
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(f"Failed to store recommendations: {e}") from e
    return rows


def save_recommendations(
    session: Session,
    candidates: Sequence[CandidateRecommendation],
    today: Optional[date] = None,
) -> list[DemandShiftRecommendation]:
    """Persist candidates that are not already stored for the same day.

    Returns only the rows written by this call.
    """
    if not candidates:
        return []
    today = today or utc_today()
    user_ids = sorted({c.user_id for c in candidates})

    try:
        existing = _existing_for_day(session, user_ids, today)
    except SQLAlchemyError as e:
        # Fall back to the table's unique constraint
        session.rollback()
        logger.warning("Could not read existing recommendations, inserting unchecked: %s", e)
        existing = []

    to_insert = _drop_duplicates(candidates, existing)
    if not to_insert:
        return []

    rows = _insert(session, to_insert, today)
    logger.info("Stored %d of %d recommendations for users %s", len(rows), len(candidates), user_ids)
    return rows


def run_generation(
    session: Session,
    user_id: str,
    company_id: str,
    today: Optional[date] = None,
) -> list[DemandShiftRecommendation]:
    """Generate and store recommendations for one user from today's prices."""
    prices = current_prices(session, today)
    if not prices:
        raise NoPriceDataError(f"No electricity prices for {today or utc_today()}")
    demands = list_demands(session, user_id)
    candidates = generate(demands, prices, company_id=company_id, user_id=user_id)
    return save_recommendations(session, candidates, today=today)


def _as_uuid(value) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundError(f"Recommendation {value} not found")


def get_recommendation(session: Session, recommendation_id) -> DemandShiftRecommendation:
    try:
        rec = session.get(DemandShiftRecommendation, _as_uuid(recommendation_id))
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to read recommendation {recommendation_id}: {e}") from e
    if rec is None:
        raise NotFoundError(f"Recommendation {recommendation_id} not found")
    return rec


def _fetch(session: Session, stmt) -> list[DemandShiftRecommendation]:
    try:
        return list(session.scalars(stmt.order_by(DemandShiftRecommendation.created_at.desc())).all())
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to read recommendations: {e}") from e


def list_user_recommendations(session: Session, user_id: str) -> list[DemandShiftRecommendation]:
    return _fetch(session, select(DemandShiftRecommendation).where(DemandShiftRecommendation.user_id == user_id))


def list_today_recommendations(session: Session, user_id: str, today: Optional[date] = None) -> list[DemandShiftRecommendation]:
    today = today or utc_today()
    return _fetch(
        session,
        select(DemandShiftRecommendation).where(
            DemandShiftRecommendation.user_id == user_id,
            DemandShiftRecommendation.recommendation_date == today,
        ),
    )


def list_company_recommendations(session: Session, company_id: str) -> list[DemandShiftRecommendation]:
    return _fetch(session, select(DemandShiftRecommendation).where(DemandShiftRecommendation.company_id == company_id))
