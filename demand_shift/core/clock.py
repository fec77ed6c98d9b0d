from datetime import date, datetime, timezone


def utc_today() -> date:
    """Calendar day in UTC. Price tables and the duplicate window are keyed on it."""
    return datetime.now(timezone.utc).date()
