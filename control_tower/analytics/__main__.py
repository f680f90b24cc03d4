"""
CLI entrypoint for the control tower overview.

Usage:
    python -m control_tower.analytics
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from control_tower.analytics.overview import run as run_overview

console = Console()

TIER_COLORS = {
    "accelerating": "green",
    "growing": "green3",
    "flat": "white",
    "cooling": "yellow",
    "declining": "red",
}


def _delta(value: float) -> str:
    color = "red" if value < 0 else "green"
    return f"[{color}]{value:+.1f}%[/]"


def print_overview(overview: dict) -> None:
    rollup = overview["rollup"]
    deltas = overview["deltas"]
    headline = overview["headline"]
    pulse = overview["pulse"]
    platform = overview["platform"]

    # ---- KPI cards ----
    console.rule("[bold green]Revenue")
    kpis = Table(box=box.ROUNDED, show_header=True, header_style="bold magenta")
    kpis.add_column("Window")
    kpis.add_column("Revenue", justify="right")
    kpis.add_column("Delta", justify="right")
    kpis.add_row("Today", f"${rollup['today']:,.2f}", "")
    kpis.add_row("Week", f"${rollup['week']:,.2f}", _delta(deltas["week"]))
    kpis.add_row("Month", f"${rollup['month']:,.2f}", _delta(deltas["month"]))
    kpis.add_row("Gross", f"${rollup['gross_revenue']:,.2f}", "")
    kpis.add_row("Refunds", f"${rollup['refunds_total']:,.2f}", "")
    kpis.add_row("Net", f"${rollup['net_revenue']:,.2f}", "")
    console.print(kpis)
    console.print(
        f"Headline ({headline['time_range']}): ${headline['current']:,.2f} {_delta(headline['delta_pct'])} | "
        f"Live pulse: ${pulse['per_minute']:,}/min over {pulse['minutes_elapsed']} min"
    )
    console.print(
        f"Orders {platform['total_orders']:,} ({platform['active_orders']:,} active) | "
        f"Users {platform['total_users']:,} | Sellers {platform['total_sellers']:,} | "
        f"Buyers {platform['total_buyers']:,} | Pending approvals {platform['pending_approvals']:,} | "
        f"Low stock {platform['low_stock_alerts']:,} | Open disputes {platform['active_disputes']:,}"
    )

    # ---- Activity ----
    console.rule("[bold green]Recent Orders")
    recent = Table(box=box.SIMPLE, show_header=True, header_style="bold magenta")
    for column in ("Order", "Created", "Total", "Status", "Payment"):
        recent.add_column(column, justify="right" if column == "Total" else "left")
    for row in overview["recent_orders"].iter_rows(named=True):
        created = f"{row['created_at']:%Y-%m-%d %H:%M}" if row["created_at"] else "-"
        recent.add_row(row["order_id"], created, f"${row['total']:,.2f}", row["status"], row["payment_status"])
    console.print(recent)
    console.print(
        "Top sellers: " + ", ".join(
            f"{row['seller_id']} (${row['revenue']:,.0f}, {row['orders']} orders)"
            for row in overview["top_sellers"].iter_rows(named=True)
        )
    )

    # ---- Series ----
    series = overview["series"]
    console.rule(f"[bold green]Revenue Trend ({overview['granularity']}, {series['category']} x{series['weight']})")
    last = series["history"].tail(1)
    if last.height:
        console.print(f"Last actual: {last['value'][0]:,}")
    console.print("Forecast: " + ", ".join(f"{v:,}" for v in series["forecast"]["value"].to_list()))
    for note in series["annotations"]:
        console.print(f"  [cyan]{note['label']}[/] @ {note['timestamp']:%Y-%m-%d}: {note['value']:,}")

    # ---- Geo ----
    geo = overview["geo"]
    console.rule("[bold green]Regions")
    if geo["is_fallback"]:
        console.print("[yellow]No region matches the current filters; showing all regions.[/yellow]")
    console.print(
        f"Sales ${geo['total_sales']:,.0f} | Orders {geo['total_orders']:,} | "
        f"Sellers {geo['total_sellers']:,} | Buyers {geo['total_buyers']:,} | "
        f"Regions {geo['active_region_count']} | Avg growth {geo['average_growth_pct']:+.1f}%"
    )

    table = Table(box=box.ROUNDED, show_header=True, header_style="bold magenta", expand=True)
    table.add_column("#", style="bold", width=3, justify="right")
    table.add_column("Region", style="bold")
    table.add_column("Country")
    table.add_column("Sales", justify="right")
    table.add_column("Growth", justify="right")
    table.add_column("Intensity", justify="right")
    table.add_column("Tier")

    markers = {row["name"]: row for row in overview["markers"].iter_rows(named=True)}
    for rank, row in enumerate(geo["ranking"].iter_rows(named=True), start=1):
        marker = markers[row["name"]]
        color = TIER_COLORS.get(marker["color_tier"], "white")
        table.add_row(
            str(rank),
            row["name"],
            row["country"],
            f"${row['sales']:,.0f}",
            _delta(row["growth_pct"]),
            f"{marker['intensity']:.2f}",
            f"[{color}]{marker['color_tier']}[/{color}]",
        )
    console.print(table)


def main(
    filters: Optional[dict] = None,
    time_range: str = "month",
    granularity: str = "weekly",
    category: str = "all",
) -> dict:
    console.rule("[bold blue]Control Tower — Overview")
    overview = run_overview(
        filters=filters, time_range=time_range, granularity=granularity, category=category
    )
    print_overview(overview)
    return overview


if __name__ == "__main__":
    main()
