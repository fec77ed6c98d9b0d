import uuid
from datetime import datetime
from sqlalchemy import Column, Date, DateTime, Float, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from demand_shift.core.clock import utc_today
from demand_shift.core.database import Base

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
IMPLEMENTED = "implemented"

STATUSES = (PENDING, APPROVED, REJECTED, IMPLEMENTED)

class DemandShiftRecommendation(Base):
    __tablename__ = "demand_shift_recommendations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_id = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)

    original_hour = Column(String, nullable=False)
    recommended_hour = Column(String, nullable=False)
    original_load_kwh = Column(Float, nullable=False)
    potential_savings = Column(Float, nullable=False, default=0.0)
    co2_reduction_kg = Column(Float, nullable=False, default=0.0)
    reason = Column(String)
    status = Column(String, nullable=False, default=PENDING)

    # Calendar day of generation, the window for duplicate detection
    recommendation_date = Column(Date, nullable=False, default=utc_today)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    approved_at = Column(DateTime, nullable=True)
    implemented_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "company_id", "user_id", "original_hour", "recommended_hour",
            "original_load_kwh", "recommendation_date",
            name="uq_recommendation_per_day",
        ),
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "company_id": self.company_id,
            "user_id": self.user_id,
            "original_hour": self.original_hour,
            "recommended_hour": self.recommended_hour,
            "original_load_kwh": self.original_load_kwh,
            "potential_savings": self.potential_savings,
            "co2_reduction_kg": self.co2_reduction_kg,
            "reason": self.reason,
            "status": self.status,
            "recommendation_date": self.recommendation_date.isoformat() if self.recommendation_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "implemented_at": self.implemented_at.isoformat() if self.implemented_at else None,
        }
