"""
CLI entrypoint: python -m control_tower.pipeline
Loads the data store snapshot and prints the revenue windows and rollups.
"""

from datetime import datetime
from typing import Optional

from control_tower.analytics.revenue import revenue_deltas, rollup_revenue
from control_tower.pipeline.ingest import load_snapshot
from control_tower.pipeline.transform import filter_window
from control_tower.pipeline.windows import resolve_boundaries, window_bounds


def main(now: Optional[datetime] = None) -> None:
    now = now or datetime.now()
    print("[pipeline] Starting Control Tower revenue pipeline")

    # Step 1: Ingest
    print("[pipeline] Step 1/3 — Loading data store snapshot...")
    snapshot = load_snapshot(now)
    orders = snapshot["orders"]
    completed = filter_window(orders, payment_status="completed")
    print(f"  Loaded {len(orders):,} orders | {len(completed):,} with completed payment")

    # Step 2: Windows
    print("[pipeline] Step 2/3 — Resolving windows...")
    for window, (start, end) in window_bounds(resolve_boundaries(now)).items():
        end_label = end.strftime("%Y-%m-%d") if end else "now"
        print(f"  {window:<15} [{start:%Y-%m-%d}, {end_label})")

    # Step 3: Rollups
    print("[pipeline] Step 3/3 — Rolling up revenue...")
    rollup = rollup_revenue(orders, now)
    deltas = revenue_deltas(rollup)

    print("\nRevenue:")
    for key, value in rollup.items():
        print(f"  {key:<15} ${value:>14,.2f}")
    print(f"\n  Week over week : {deltas['week']:+.1f}%")
    print(f"  Month over month: {deltas['month']:+.1f}%")


if __name__ == "__main__":
    main()
