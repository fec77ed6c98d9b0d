import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from demand_shift.core.config import GENERATION_CRON_HOUR, GENERATION_CRON_MINUTE
from demand_shift.core.database import SessionLocal
from demand_shift.core.errors import DemandShiftError, NoPriceDataError
from demand_shift.services.demands import users_with_demands
from demand_shift.services.recommendations import run_generation

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def generate_for_all_users(session_factory=SessionLocal) -> int:
    """Run recommendation generation for every user with demand records.

    Returns the number of recommendations stored. A failure for one user is
    logged and the run moves on to the next.
    """
    session = session_factory()
    stored = 0
    try:
        for user_id, company_id in users_with_demands(session):
            try:
                stored += len(run_generation(session, user_id, company_id))
            except NoPriceDataError:
                logger.warning("No prices for today, skipping nightly generation")
                break
            except DemandShiftError:
                logger.exception("Generation failed for user %s", user_id)
                # Leave the session usable for the next user
                session.rollback()
    finally:
        session.close()
    logger.info("Nightly generation stored %d recommendations", stored)
    return stored


def schedule_jobs():
    # Prices are published the day before; generate once they are effective
    trigger = CronTrigger(hour=GENERATION_CRON_HOUR, minute=GENERATION_CRON_MINUTE)
    scheduler.add_job(generate_for_all_users, trigger, id="recommendations_daily", replace_existing=True)


def start():
    schedule_jobs()
    scheduler.start()


def stop():
    scheduler.shutdown(wait=False)
