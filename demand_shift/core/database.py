from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from demand_shift.core.config import DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

# Create a base class that all ORM models will inherit from
Base = declarative_base()


def get_db():
    """FastAPI dependency yielding a session that is closed after the request."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def init_db(bind=None):
    """Create any missing tables. Migrations under alembic/ are the source of truth in production."""
    from demand_shift.models import approval, demand, greenpoints, price, recommendation  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
