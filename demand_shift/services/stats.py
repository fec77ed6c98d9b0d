import pandas as pd
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from demand_shift.core.errors import StorageError
from demand_shift.models.recommendation import APPROVED, IMPLEMENTED, PENDING, REJECTED, DemandShiftRecommendation


def summarise(rows: list[dict]) -> dict:
    """Reduce recommendation rows to status counts and savings/CO2 totals.

    Totals cover every row regardless of status.
    """
    df = pd.DataFrame(rows, columns=["status", "potential_savings", "co2_reduction_kg"])
    if df.empty:
        return {
            "total": 0,
            "pending": 0,
            "approved": 0,
            "rejected": 0,
            "implemented": 0,
            "total_savings": 0.0,
            "total_co2_reduction": 0.0,
        }

    counts = df["status"].value_counts()
    return {
        "total": int(len(df)),
        "pending": int(counts.get(PENDING, 0)),
        "approved": int(counts.get(APPROVED, 0)),
        "rejected": int(counts.get(REJECTED, 0)),
        "implemented": int(counts.get(IMPLEMENTED, 0)),
        "total_savings": float(df["potential_savings"].fillna(0.0).astype(float).sum()),
        "total_co2_reduction": float(df["co2_reduction_kg"].fillna(0.0).astype(float).sum()),
    }


def recommendation_stats(session: Session, company_id: str) -> dict:
    stmt = select(
        DemandShiftRecommendation.status,
        DemandShiftRecommendation.potential_savings,
        DemandShiftRecommendation.co2_reduction_kg,
    ).where(DemandShiftRecommendation.company_id == company_id)
    try:
        rows = [dict(r) for r in session.execute(stmt).mappings().all()]
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to read recommendations for company {company_id}: {e}") from e
    return summarise(rows)
