"""Tests for the nightly generation job."""
from unittest.mock import patch

from demand_shift.core.clock import utc_today
from demand_shift.core.errors import StorageError
from demand_shift.tasks import scheduler


class TestNightlyGeneration:

    def test_generates_for_every_user(self, session_factory, seed_prices, seed_demands):
        seed_prices(day=utc_today())
        seed_demands(user_id="u1", slots=(("08:00-09:00", 100.0),))
        seed_demands(user_id="u2", company_id="globex", slots=(("18:00-19:00", 40.0),), requested=True)
        assert scheduler.generate_for_all_users(session_factory) == 2
        # Re-running the same night adds nothing
        assert scheduler.generate_for_all_users(session_factory) == 0

    def test_no_prices_stops_run(self, session_factory, seed_demands):
        seed_demands()
        assert scheduler.generate_for_all_users(session_factory) == 0

    def test_failure_for_one_user_does_not_stop_others(self, session_factory, seed_prices, seed_demands):
        seed_prices(day=utc_today())
        seed_demands(user_id="u1")
        seed_demands(user_id="u2")
        real_run = scheduler.run_generation

        def flaky(session, user_id, company_id):
            if user_id == "u1":
                raise StorageError("timeout")
            return real_run(session, user_id, company_id)

        with patch("demand_shift.tasks.scheduler.run_generation", side_effect=flaky):
            assert scheduler.generate_for_all_users(session_factory) == 1

    def test_schedule_jobs_registers_daily_job(self):
        with patch.object(scheduler, "scheduler") as mock_scheduler:
            scheduler.schedule_jobs()
            args, kwargs = mock_scheduler.add_job.call_args
            assert args[0] is scheduler.generate_for_all_users
            assert kwargs["id"] == "recommendations_daily"

    def test_session_rolled_back_after_failed_user(self, session_factory, seed_prices, seed_demands):
        seed_prices(day=utc_today())
        seed_demands(user_id="u1")
        seed_demands(user_id="u2")
        shared = session_factory()
        real_run = scheduler.run_generation

        def failing_read(session, user_id, company_id):
            if user_id == "u1":
                raise StorageError("server closed the connection unexpectedly")
            return real_run(session, user_id, company_id)

        with patch("demand_shift.tasks.scheduler.run_generation", side_effect=failing_read), \
                patch.object(shared, "rollback", wraps=shared.rollback) as mock_rollback:
            assert scheduler.generate_for_all_users(lambda: shared) == 1
            mock_rollback.assert_called_once()
