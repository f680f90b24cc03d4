"""
Control tower overview: one refresh of every aggregate for the current view
state (geo filters, time range, revenue granularity, category weight).

Nothing is cached. Call build_overview again on data load or filter change.
"""

from datetime import datetime
from typing import Optional

import polars as pl

from control_tower.analytics.geo import summarize_regions
from control_tower.analytics.markers import derive_markers
from control_tower.analytics.platform import platform_counts, recent_orders, top_sellers
from control_tower.analytics.revenue import (
    headline_revenue,
    live_pulse,
    revenue_deltas,
    rollup_revenue,
)
from control_tower.analytics.series import scale_series
from control_tower.contracts.schemas import GRANULARITIES
from control_tower.pipeline.ingest import require_frame


def build_overview(
    orders: pl.DataFrame,
    regions: pl.DataFrame,
    now: datetime,
    *,
    history: Optional[pl.DataFrame] = None,
    forecast: Optional[pl.DataFrame] = None,
    accounts: Optional[pl.DataFrame] = None,
    products: Optional[pl.DataFrame] = None,
    disputes: Optional[pl.DataFrame] = None,
    filters: Optional[dict] = None,
    time_range: str = "month",
    granularity: str = "weekly",
    category: str = "all",
) -> dict:
    """
    Compose rollups, deltas, scaled series, geo summary, markers, live pulse,
    platform counters and the recent-order / top-seller lists into one dict
    for the presentation layer.

    When history/forecast are not given, the platform series for
    `granularity` is used.
    """
    require_frame(orders, "orders")
    require_frame(regions, "regions")
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown granularity '{granularity}'. Expected one of {GRANULARITIES}")
    if history is None or forecast is None:
        from control_tower.data_generator.generate import revenue_series

        history, forecast = revenue_series(granularity)

    rollup = rollup_revenue(orders, now)
    geo = summarize_regions(regions, filters)

    return {
        "generated_at": now,
        "time_range": time_range,
        "granularity": granularity,
        "rollup": rollup,
        "deltas": revenue_deltas(rollup),
        "headline": headline_revenue(rollup, time_range),
        "pulse": live_pulse(rollup, now),
        "series": scale_series(history, forecast, category),
        "geo": geo,
        "markers": derive_markers(geo["display"]),
        "platform": platform_counts(orders, accounts, products, disputes),
        "recent_orders": recent_orders(orders),
        "top_sellers": top_sellers(orders),
    }


def run(
    now: Optional[datetime] = None,
    filters: Optional[dict] = None,
    time_range: str = "month",
    granularity: str = "weekly",
    category: str = "all",
) -> dict:
    """Load the data store snapshot and build the overview."""
    from control_tower.pipeline.ingest import load_snapshot

    now = now or datetime.now()
    snapshot = load_snapshot(now)
    overview = build_overview(
        snapshot["orders"],
        snapshot["regions"],
        now,
        accounts=snapshot["accounts"],
        products=snapshot["products"],
        disputes=snapshot["disputes"],
        filters=filters,
        time_range=time_range,
        granularity=granularity,
        category=category,
    )

    geo = overview["geo"]
    print(f"[overview] {overview['rollup']['month']:,.2f} month revenue | "
          f"{geo['active_region_count']} active regions"
          + (" (filter matched nothing, showing all)" if geo["is_fallback"] else ""))
    return overview
