"""
Period window resolver: boundary instants for today / week / month and the
windows immediately preceding them.

Weeks are 7-day steps. Months are calendar steps; when the target month is
shorter, the day clamps to its last day (Mar 31 -> Feb 29 in a leap year).
"""

from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta


def start_of_day(ts: datetime) -> datetime:
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def resolve_boundaries(now: datetime) -> dict[str, datetime]:
    """Return the boundary instants used by every revenue window."""
    today = start_of_day(now)
    return {
        "now": now,
        "today": today,
        "week_ago": today - timedelta(days=7),
        "two_weeks_ago": today - timedelta(days=14),
        # relativedelta clamps the day to the target month's length
        "month_ago": today - relativedelta(months=1),
        "two_months_ago": today - relativedelta(months=2),
    }


def window_bounds(boundaries: dict[str, datetime]) -> dict[str, tuple]:
    """
    Map each rollup window to a half-open (start, end) interval.
    end=None means open-ended.
    """
    return {
        "today": (boundaries["today"], None),
        "week": (boundaries["week_ago"], None),
        "month": (boundaries["month_ago"], None),
        "previous_week": (boundaries["two_weeks_ago"], boundaries["week_ago"]),
        "previous_month": (boundaries["two_months_ago"], boundaries["month_ago"]),
    }
