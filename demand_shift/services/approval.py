"""
Approval workflow for stored recommendations.

    pending -> approved -> implemented
    pending -> rejected

Every transition appends an ApprovalWorkflow row. Deciding on a recommendation
that is no longer pending changes nothing.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from demand_shift.core.errors import InvalidTransitionError, StorageError
from demand_shift.models.approval import ApprovalWorkflow
from demand_shift.models.recommendation import APPROVED, IMPLEMENTED, PENDING, REJECTED, DemandShiftRecommendation
from demand_shift.services.greenpoints import GreenPointsRewards, RewardsCollaborator
from demand_shift.services.recommendations import get_recommendation

logger = logging.getLogger(__name__)


def _transition(
    session: Session,
    rec: DemandShiftRecommendation,
    from_status: str,
    status: str,
    approved_by: Optional[str],
    notes: Optional[str],
) -> bool:
    """Move `rec` from `from_status` to `status` and append a workflow entry.

    The status change is a conditional UPDATE, so of two concurrent callers
    only one applies it. Returns False, with `rec` refreshed, when the row
    was no longer in `from_status`.
    """
    now = datetime.utcnow()
    stamp = {"implemented_at": now} if status == IMPLEMENTED else {"approved_at": now}
    stmt = (
        update(DemandShiftRecommendation)
        .where(DemandShiftRecommendation.id == rec.id, DemandShiftRecommendation.status == from_status)
        .values(status=status, updated_at=now, **stamp)
    )
    try:
        result = session.execute(stmt)
        if result.rowcount == 0:
            session.rollback()
            session.refresh(rec)
            return False
        session.add(ApprovalWorkflow(
            recommendation_id=rec.id,
            requested_by=rec.user_id,
            approved_by=approved_by,
            approval_status=status,
            notes=notes,
            created_at=now,
        ))
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(f"Failed to update recommendation {rec.id}: {e}") from e
    return True


def _award_points(rewards: RewardsCollaborator, rec: DemandShiftRecommendation) -> bool:
    """Award points for an approved shift. Failures are logged, never raised."""
    try:
        rewards.award_shift_points(rec.user_id, float(rec.potential_savings or 0.0))
    except Exception:
        logger.exception("Awarding points for recommendation %s failed", rec.id)
        return False
    return True


def decide(
    session: Session,
    recommendation_id,
    approved: bool,
    notes: Optional[str] = None,
    decided_by: Optional[str] = None,
    rewards: Optional[RewardsCollaborator] = None,
) -> DemandShiftRecommendation:
    """Approve or reject a pending recommendation."""
    rec = get_recommendation(session, recommendation_id)
    status = APPROVED if approved else REJECTED
    if rec.status != PENDING or not _transition(session, rec, PENDING, status, decided_by, notes):
        logger.info("Recommendation %s is already %s, ignoring decision", rec.id, rec.status)
        return rec

    logger.info("Recommendation %s %s", rec.id, status)
    if approved:
        _award_points(rewards or GreenPointsRewards(), rec)
    return rec


def mark_implemented(session: Session, recommendation_id, notes: Optional[str] = None) -> DemandShiftRecommendation:
    rec = get_recommendation(session, recommendation_id)
    if rec.status != APPROVED or not _transition(session, rec, APPROVED, IMPLEMENTED, None, notes):
        raise InvalidTransitionError(f"Recommendation {rec.id} is {rec.status}, only approved shifts can be implemented")
    return rec


def workflow_history(session: Session, recommendation_id) -> list[ApprovalWorkflow]:
    """Audit trail of a recommendation, newest first."""
    rec = get_recommendation(session, recommendation_id)
    stmt = (
        select(ApprovalWorkflow)
        .where(ApprovalWorkflow.recommendation_id == rec.id)
        .order_by(ApprovalWorkflow.created_at.desc())
    )
    try:
        return list(session.scalars(stmt).all())
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to read workflow for {recommendation_id}: {e}") from e
