import uuid
from datetime import datetime
from sqlalchemy import Column, Date, DateTime, Float, String
from sqlalchemy.dialects.postgresql import UUID
from demand_shift.core.database import Base

class ElectricityDemand(Base):
    """Confirmed demand entered by a company user."""
    __tablename__ = "electricity_demands"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_id = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)

    hour_slot = Column(String, nullable=False)
    demand_kwh = Column(Float, nullable=False)
    cost = Column(Float, default=0.0)
    demand_date = Column(Date)
    status = Column(String, default="pending")
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

class DemandRequest(Base):
    """Demand requested but not yet confirmed."""
    __tablename__ = "demand_requests"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_id = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    company_name = Column(String)
    company_code = Column(String)

    hour_slot = Column(String, nullable=False)
    demand_kwh = Column(Float, nullable=False)
    request_date = Column(Date)
    status = Column(String, default="pending")
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
