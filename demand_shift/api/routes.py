from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from demand_shift.core.database import get_db
from demand_shift.core.errors import (
    InvalidHourSlotError,
    InvalidTransitionError,
    NoPriceDataError,
    NotFoundError,
    StorageError,
)
from demand_shift.services import approval, prices, recommendations, stats
from demand_shift.services.greenpoints import GreenPointsRewards

router = APIRouter()


def get_rewards():
    return GreenPointsRewards()


@router.get("/health")
def health():
    return {"status": "ok"}


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (NoPriceDataError, InvalidTransitionError)):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, InvalidHourSlotError):
        return HTTPException(status_code=422, detail=str(e))
    return HTTPException(status_code=503, detail=f"Storage unavailable: {e}")


class GenerateRequest(BaseModel):
    user_id: str
    company_id: str


class DecisionRequest(BaseModel):
    approved: bool
    notes: str | None = None
    decided_by: str | None = None


class ImplementRequest(BaseModel):
    notes: str | None = None


@router.post("/recommendations/generate")
def generate_recommendations(req: GenerateRequest, db: Session = Depends(get_db)):
    """
    Generate demand shift recommendations for a user from today's price table.

    Returns only the recommendations stored by this call; candidates already
    stored today (or written concurrently by another run) are skipped.
    """
    try:
        created = recommendations.run_generation(db, req.user_id, req.company_id)
    except (NoPriceDataError, InvalidHourSlotError, StorageError) as e:
        raise _http_error(e)
    return {
        "status": "success",
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "created": len(created),
        "recommendations": [r.to_dict() for r in created],
    }


@router.get("/recommendations/users/{user_id}")
def user_recommendations(user_id: str, db: Session = Depends(get_db)):
    try:
        rows = recommendations.list_user_recommendations(db, user_id)
    except StorageError as e:
        raise _http_error(e)
    return [r.to_dict() for r in rows]


@router.get("/recommendations/users/{user_id}/today")
def today_recommendations(user_id: str, db: Session = Depends(get_db)):
    try:
        rows = recommendations.list_today_recommendations(db, user_id)
    except StorageError as e:
        raise _http_error(e)
    return [r.to_dict() for r in rows]


@router.get("/recommendations/companies/{company_id}")
def company_recommendations(company_id: str, db: Session = Depends(get_db)):
    try:
        rows = recommendations.list_company_recommendations(db, company_id)
    except StorageError as e:
        raise _http_error(e)
    return [r.to_dict() for r in rows]


@router.get("/recommendations/companies/{company_id}/stats")
def company_stats(company_id: str, db: Session = Depends(get_db)):
    try:
        return stats.recommendation_stats(db, company_id)
    except StorageError as e:
        raise _http_error(e)


@router.post("/recommendations/{recommendation_id}/decision")
def decide(
    recommendation_id: str,
    req: DecisionRequest,
    db: Session = Depends(get_db),
    rewards: GreenPointsRewards = Depends(get_rewards),
):
    try:
        rec = approval.decide(db, recommendation_id, req.approved, notes=req.notes,
                              decided_by=req.decided_by, rewards=rewards)
    except (NotFoundError, StorageError) as e:
        raise _http_error(e)
    return rec.to_dict()


@router.post("/recommendations/{recommendation_id}/implement")
def implement(recommendation_id: str, req: ImplementRequest | None = None, db: Session = Depends(get_db)):
    try:
        rec = approval.mark_implemented(db, recommendation_id, notes=req.notes if req else None)
    except (NotFoundError, InvalidTransitionError, StorageError) as e:
        raise _http_error(e)
    return rec.to_dict()


@router.get("/recommendations/{recommendation_id}/workflow")
def workflow(recommendation_id: str, db: Session = Depends(get_db)):
    try:
        entries = approval.workflow_history(db, recommendation_id)
    except (NotFoundError, StorageError) as e:
        raise _http_error(e)
    return [e.to_dict() for e in entries]


@router.get("/prices/current")
def current_prices(db: Session = Depends(get_db)):
    try:
        entries = prices.current_prices(db)
    except StorageError as e:
        raise _http_error(e)
    return [
        {
            "hour_range": p.hour_range,
            "unit_price": p.unit_price,
            "period_type": p.period_type,
            "effective_date": p.effective_date.isoformat() if p.effective_date else None,
        }
        for p in entries
    ]
