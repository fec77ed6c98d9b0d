import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from demand_shift.core.database import Base

class ApprovalWorkflow(Base):
    """Append-only audit trail, one row per recommendation status transition."""
    __tablename__ = "approval_workflow"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    recommendation_id = Column(UUID(as_uuid=True), ForeignKey("demand_shift_recommendations.id"), nullable=False, index=True)

    requested_by = Column(String, nullable=False)
    approved_by = Column(String, nullable=True)
    approval_status = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "recommendation_id": str(self.recommendation_id),
            "requested_by": self.requested_by,
            "approved_by": self.approved_by,
            "approval_status": self.approval_status,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
