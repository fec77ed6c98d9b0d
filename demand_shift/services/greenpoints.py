"""Green points awarded for approved demand shifts.

The point rules belong to the gamification side of the application; the
approval flow only needs `award_shift_points`.
"""
from typing import Protocol

from sqlalchemy import select

from demand_shift.core.clock import utc_today
from demand_shift.core.config import DEMAND_SHIFT_POINTS
from demand_shift.core.database import SessionLocal
from demand_shift.models.greenpoints import GreenPointsHistory, UserGreenPoints

DEMAND_SHIFT_ACTION = "demand_shift"


class RewardsCollaborator(Protocol):
    def award_shift_points(self, user_id: str, savings_amount: float) -> None:
        ...


class GreenPointsRewards:
    def __init__(self, session_factory=SessionLocal, points: int = DEMAND_SHIFT_POINTS):
        self.session_factory = session_factory
        self.points = points

    def award_shift_points(self, user_id: str, savings_amount: float) -> None:
        session = self.session_factory()
        try:
            account = session.scalars(
                select(UserGreenPoints).where(UserGreenPoints.user_id == user_id)
            ).first()
            if account is None:
                account = UserGreenPoints(user_id=user_id, total_points=0)
                session.add(account)

            account.total_points = (account.total_points or 0) + self.points
            account.last_activity_date = utc_today()
            session.add(GreenPointsHistory(
                user_id=user_id,
                points_earned=self.points,
                action_type=DEMAND_SHIFT_ACTION,
                description=f"Demand shift approved, saving {savings_amount:.2f}",
            ))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
