import uuid
from datetime import datetime
from sqlalchemy import Column, Date, DateTime, Float, String
from sqlalchemy.dialects.postgresql import UUID
from demand_shift.core.database import Base

class ElectricityPrice(Base):
    __tablename__ = "electricity_prices"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    hour_range = Column(String, nullable=False)
    unit_price = Column(Float, nullable=False)
    period_type = Column(String, nullable=False, default="normal")
    effective_date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
