"""
Revenue rollup, delta and live pulse tests.
"""
from datetime import datetime, timedelta

import polars as pl
import pytest

from conftest import make_orders

from control_tower.analytics.revenue import (
    headline_revenue,
    live_pulse,
    minutes_since_midnight,
    per_minute_rate,
    percent_change,
    revenue_deltas,
    rollup_revenue,
)


# ============================================================
# Delta calculator
# ============================================================

@pytest.mark.parametrize("current, prior, expected", [
    (120, 100, 20.0),
    (80, 100, -20.0),
    (50, 0, 0.0),
    (0, 0, 0.0),
    (100, 100, 0.0),
    (1, 3, -66.7),
    (250, 200, 25.0),
])
def test_percent_change(current, prior, expected):
    assert percent_change(current, prior) == expected


def test_percent_change_matches_formula():
    for c, p in [(13.0, 7.0), (0.0, 5.0), (999.0, 1.0), (42.5, 17.25)]:
        assert percent_change(c, p) == round(((c - p) / p) * 100, 1)


# ============================================================
# Rollup
# ============================================================

def test_today_and_week_scenario(now):
    """An 8-day-old order is outside the 7-day window."""
    orders = make_orders([
        {"created_at": now, "total": 100},
        {"created_at": now - timedelta(days=8), "total": 50},
    ])

    rollup = rollup_revenue(orders, now)

    assert rollup["today"] == 100
    assert rollup["week"] == 100
    assert rollup["month"] == 150
    assert rollup["previous_week"] == 50


def test_only_completed_payments_count(now):
    orders = make_orders([
        {"created_at": now, "total": 100, "payment_status": "completed"},
        {"created_at": now, "total": 70, "payment_status": "pending"},
        {"created_at": now, "total": 30, "payment_status": "refunded"},
    ])
    assert rollup_revenue(orders, now)["today"] == 100


def test_previous_month_window(now):
    # now = 2024-05-15 14:30 -> month_ago = 04-15, two_months_ago = 03-15
    orders = make_orders([
        {"created_at": datetime(2024, 4, 20), "total": 10},    # month
        {"created_at": datetime(2024, 4, 15), "total": 20},    # month (inclusive start)
        {"created_at": datetime(2024, 4, 14, 23), "total": 40},  # previous month
        {"created_at": datetime(2024, 3, 15), "total": 80},    # previous month (inclusive start)
        {"created_at": datetime(2024, 3, 14), "total": 160},   # outside
        {"created_at": None, "total": 320},
    ])

    rollup = rollup_revenue(orders, now)

    assert rollup["month"] == 30
    assert rollup["previous_month"] == 120


def test_timezone_aware_orders_roll_up(now):
    orders = make_orders([
        {"created_at": now, "total": 100},
        {"created_at": now - timedelta(days=8), "total": 50},
    ]).with_columns(pl.col("created_at").dt.replace_time_zone("UTC"))

    rollup = rollup_revenue(orders, now)

    assert rollup["today"] == 100
    assert rollup["previous_week"] == 50


def test_derived_revenue_figures(now):
    orders = make_orders([{"created_at": now - timedelta(days=3), "total": 1000}])

    rollup = rollup_revenue(orders, now)

    assert rollup["gross_revenue"] == pytest.approx(1150.0)
    assert rollup["refunds_total"] == pytest.approx(30.0)
    assert rollup["net_revenue"] == pytest.approx(970.0)


def test_multipliers_are_overridable(now):
    orders = make_orders([{"created_at": now, "total": 200}])

    rollup = rollup_revenue(orders, now, markup=1.5, refund_rate=0.1)

    assert rollup["gross_revenue"] == pytest.approx(300.0)
    assert rollup["refunds_total"] == pytest.approx(20.0)
    assert rollup["net_revenue"] == pytest.approx(180.0)


def test_empty_orders_roll_up_to_zero(now):
    rollup = rollup_revenue(make_orders([]), now)
    assert all(value == 0 for value in rollup.values())


def test_revenue_deltas(now):
    orders = make_orders([
        {"created_at": now - timedelta(days=1), "total": 120},
        {"created_at": now - timedelta(days=10), "total": 100},
    ])
    rollup = rollup_revenue(orders, now)

    deltas = revenue_deltas(rollup)

    assert deltas["week"] == 20.0
    # previous month window is empty -> 0 by policy
    assert deltas["month"] == 0.0


def test_headline_revenue():
    rollup = {"today": 5.0, "week": 120.0, "month": 300.0, "previous_week": 100.0, "previous_month": 400.0}

    week = headline_revenue(rollup, "week")
    assert week == {"time_range": "week", "current": 120.0, "prior": 100.0, "delta_pct": 20.0}

    assert headline_revenue(rollup, "month")["delta_pct"] == -25.0

    today = headline_revenue(rollup, "today")
    assert today["prior"] is None
    assert today["delta_pct"] == 0.0


def test_headline_revenue_rejects_unknown_range():
    with pytest.raises(ValueError):
        headline_revenue({}, "year")


# ============================================================
# Live pulse
# ============================================================

def test_minutes_since_midnight():
    assert minutes_since_midnight(datetime(2024, 5, 15, 14, 30)) == 870
    assert minutes_since_midnight(datetime(2024, 5, 15, 0, 0, 30)) == 1


def test_per_minute_rate():
    assert per_minute_rate(870, 870) == 1
    assert per_minute_rate(1000, 3) == 333
    assert per_minute_rate(500, 0) == 500


def test_per_minute_rate_rounds_halves_up():
    assert per_minute_rate(5, 2) == 3
    assert per_minute_rate(7, 2) == 4
    assert per_minute_rate(1, 2) == 1


def test_live_pulse(now):
    pulse = live_pulse({"today": 8700.0}, now)
    assert pulse == {"minutes_elapsed": 870, "today_total": 8700.0, "per_minute": 10}
