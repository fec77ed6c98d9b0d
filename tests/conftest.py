"""Pytest configuration and shared fixtures."""
import pytest
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from demand_shift.core.database import init_db
from demand_shift.core.schemas import DemandRecord, PriceEntry
from demand_shift.models.demand import DemandRequest, ElectricityDemand
from demand_shift.models.price import ElectricityPrice


TODAY = date(2025, 9, 20)


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    s = session_factory()
    yield s
    s.close()


@pytest.fixture
def day_prices():
    """A price table covering all 24 hours, with an off-peak range wrapping midnight."""
    return [
        PriceEntry("06:00-17:00", 2.10, "normal"),
        PriceEntry("17:00-22:00", 3.20, "peak"),
        PriceEntry("22:00-06:00", 1.25, "off-peak"),
    ]


@pytest.fixture
def sample_demands():
    return [
        DemandRecord(id="d1", company_id="acme", user_id="u1", hour_slot="08:00-09:00", demand_kwh=100.0),
        DemandRecord(id="d2", company_id="acme", user_id="u1", hour_slot="18:00-19:00", demand_kwh=40.0),
        DemandRecord(id="d3", company_id="acme", user_id="u1", hour_slot="23:00-00:00", demand_kwh=60.0),
    ]


@pytest.fixture
def seed_prices(session):
    """Store a price table effective on the given day."""
    def _seed(day=TODAY, entries=None):
        entries = entries or [
            ("06:00-17:00", 2.10, "normal"),
            ("17:00-22:00", 3.20, "peak"),
            ("22:00-06:00", 1.25, "off-peak"),
        ]
        for hour_range, price, period in entries:
            session.add(ElectricityPrice(hour_range=hour_range, unit_price=price,
                                         period_type=period, effective_date=day))
        session.commit()
    return _seed


@pytest.fixture
def seed_demands(session):
    def _seed(user_id="u1", company_id="acme", slots=(("08:00-09:00", 100.0),), requested=False):
        for hour_slot, kwh in slots:
            if requested:
                session.add(DemandRequest(user_id=user_id, company_id=company_id,
                                          hour_slot=hour_slot, demand_kwh=kwh, request_date=TODAY))
            else:
                session.add(ElectricityDemand(user_id=user_id, company_id=company_id,
                                              hour_slot=hour_slot, demand_kwh=kwh, demand_date=TODAY))
        session.commit()
    return _seed
