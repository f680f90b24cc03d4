"""
Revenue rollups for the control tower KPI cards.

Sums completed-payment orders into today / week / month windows and the
windows immediately preceding them, then derives:
  - gross / refunds / net figures from the month total
  - week-over-week and month-over-month deltas
  - the live "per minute" pulse for today
"""

import math
from datetime import datetime
from typing import Optional

import polars as pl

from control_tower.contracts.schemas import (
    REFUND_RATE,
    REVENUE_MARKUP,
    ROLLUP_WINDOWS,
    TIME_RANGES,
)
from control_tower.pipeline.transform import StatusMatch, filter_window, sum_total
from control_tower.pipeline.windows import resolve_boundaries, window_bounds

# Window each headline range is compared against
_PRIOR_WINDOW = {
    "today": None,
    "week": "previous_week",
    "month": "previous_month",
}


def percent_change(current: float, prior: float) -> float:
    """Signed % change, one decimal. A zero prior yields 0.0."""
    if prior == 0:
        return 0.0
    return round(((current - prior) / prior) * 100, 1)


def rollup_revenue(
    orders: pl.DataFrame,
    now: datetime,
    *,
    payment_status: StatusMatch = "completed",
    markup: float = REVENUE_MARKUP,
    refund_rate: float = REFUND_RATE,
) -> dict:
    """
    Sum order totals per rollup window.

    Returns a dict with one entry per ROLLUP_WINDOWS name plus
    gross_revenue, refunds_total and net_revenue (all derived from month).
    """
    bounds = window_bounds(resolve_boundaries(now))
    rollup = {}
    for window in ROLLUP_WINDOWS:
        start, end = bounds[window]
        subset = filter_window(orders, start, end, payment_status=payment_status)
        rollup[window] = sum_total(subset)

    month = rollup["month"]
    refunds = month * refund_rate
    rollup["gross_revenue"] = month * markup
    rollup["refunds_total"] = refunds
    rollup["net_revenue"] = month - refunds
    return rollup


def revenue_deltas(rollup: dict) -> dict:
    """Week-over-week and month-over-month % change."""
    return {
        "week": percent_change(rollup["week"], rollup["previous_week"]),
        "month": percent_change(rollup["month"], rollup["previous_month"]),
    }


def headline_revenue(rollup: dict, time_range: str) -> dict:
    """
    Revenue for the selected time range and its delta against the preceding
    window. "today" has no preceding window, so prior is None and delta 0.0.
    """
    if time_range not in TIME_RANGES:
        raise ValueError(f"Unknown time range '{time_range}'. Expected one of {TIME_RANGES}")
    prior_window = _PRIOR_WINDOW[time_range]
    current = rollup[time_range]
    prior: Optional[float] = rollup[prior_window] if prior_window else None
    return {
        "time_range": time_range,
        "current": current,
        "prior": prior,
        "delta_pct": percent_change(current, prior) if prior is not None else 0.0,
    }


# ---------------------------------------------------------------------------
# Live pulse
# ---------------------------------------------------------------------------

def minutes_since_midnight(now: datetime) -> int:
    """Whole minutes elapsed since local midnight, never below 1."""
    return max(1, now.hour * 60 + now.minute)


def per_minute_rate(total: float, minutes_elapsed: int) -> int:
    """Whole units per minute, halves rounded up."""
    return math.floor(total / max(1, minutes_elapsed) + 0.5)


def live_pulse(rollup: dict, now: datetime) -> dict:
    minutes = minutes_since_midnight(now)
    return {
        "minutes_elapsed": minutes,
        "today_total": rollup["today"],
        "per_minute": per_minute_rate(rollup["today"], minutes),
    }
