"""
Synthetic data store snapshots for the control tower.

Generates orders spread over the last ~70 days (so every rollup window and
its predecessor has data), accounts, products, the static region performance
dataset, and the platform revenue series for each granularity.

Usage:
    python -m control_tower.data_generator.generate
"""

import os
from datetime import datetime, timedelta
from typing import Optional

import numpy as np
import polars as pl

from control_tower.contracts.schemas import (
    ACCOUNT_SCHEMA,
    ACCOUNTS_PATH,
    DISPUTE_SCHEMA,
    DISPUTE_STATUSES,
    DISPUTES_PATH,
    GRANULARITIES,
    ORDER_SCHEMA,
    ORDER_STATUSES,
    ORDERS_PATH,
    PAYMENT_STATUSES,
    PRODUCT_SCHEMA,
    PRODUCTS_PATH,
    REGION_SCHEMA,
    REGIONS_PATH,
    SERIES_SCHEMA,
)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
SEED = 42
TOTAL_ORDERS = 4_000
HISTORY_DAYS = 70
TOTAL_ACCOUNTS = 1_200
TOTAL_PRODUCTS = 600
TOTAL_DISPUTES = 80

ORDER_STATUS_WEIGHTS = [0.10, 0.15, 0.20, 0.48, 0.07]
PAYMENT_STATUS_WEIGHTS = [0.08, 0.84, 0.05, 0.03]
ROLE_WEIGHTS = {"buyer": 0.86, "seller": 0.13, "admin": 0.01}
ACCOUNT_STATUS_WEIGHTS = {"active": 0.90, "pending": 0.07, "suspended": 0.03}
DISPUTE_STATUS_WEIGHTS = [0.30, 0.20, 0.40, 0.10]


# ---------------------------------------------------------------------------
# Orders / accounts / products
# ---------------------------------------------------------------------------

def _random_created_at(rng: np.random.Generator, now: datetime) -> Optional[datetime]:
    # ~1% of rows arrive without a timestamp
    if rng.random() < 0.01:
        return None
    # Mild growth: recent days are more likely than old ones
    days_back = float(rng.triangular(0, 0, HISTORY_DAYS))
    return now - timedelta(days=days_back)


def generate_orders(
    now: Optional[datetime] = None,
    n: int = TOTAL_ORDERS,
    seed: int = SEED,
) -> pl.DataFrame:
    rng = np.random.default_rng(seed=seed)
    now = now or datetime.now()
    records = []
    for i in range(n):
        records.append({
            "order_id": f"ORD_{i + 1:06d}",
            "created_at": _random_created_at(rng, now),
            "total": round(float(rng.lognormal(mean=4.0, sigma=0.8)), 2),
            "status": str(rng.choice(ORDER_STATUSES, p=ORDER_STATUS_WEIGHTS)),
            "payment_status": str(rng.choice(PAYMENT_STATUSES, p=PAYMENT_STATUS_WEIGHTS)),
            "seller_id": f"SELLER_{rng.integers(1, 151):04d}",
            "buyer_id": f"BUYER_{rng.integers(1, 1001):05d}",
        })
    return pl.DataFrame(records, schema=ORDER_SCHEMA)


def generate_accounts(n: int = TOTAL_ACCOUNTS, seed: int = SEED) -> pl.DataFrame:
    rng = np.random.default_rng(seed=seed)
    roles = rng.choice(list(ROLE_WEIGHTS), size=n, p=list(ROLE_WEIGHTS.values()))
    statuses = rng.choice(list(ACCOUNT_STATUS_WEIGHTS), size=n, p=list(ACCOUNT_STATUS_WEIGHTS.values()))
    return pl.DataFrame(
        {
            "account_id": [f"ACC_{i + 1:06d}" for i in range(n)],
            "role": [str(r) for r in roles],
            "status": [str(s) for s in statuses],
        },
        schema=ACCOUNT_SCHEMA,
    )


def generate_products(n: int = TOTAL_PRODUCTS, seed: int = SEED) -> pl.DataFrame:
    rng = np.random.default_rng(seed=seed)
    statuses = rng.choice(["active", "draft", "archived"], size=n, p=[0.80, 0.12, 0.08])
    stock = rng.integers(0, 200, size=n)
    # About a third of the catalog uses the platform default threshold
    thresholds = [None if rng.random() < 0.33 else int(rng.integers(3, 20)) for _ in range(n)]
    return pl.DataFrame(
        {
            "product_id": [f"PROD_{i + 1:05d}" for i in range(n)],
            "status": [str(s) for s in statuses],
            "stock_quantity": [int(q) for q in stock],
            "low_stock_threshold": thresholds,
        },
        schema=PRODUCT_SCHEMA,
    )


def generate_disputes(
    n: int = TOTAL_DISPUTES,
    total_orders: int = TOTAL_ORDERS,
    seed: int = SEED,
) -> pl.DataFrame:
    rng = np.random.default_rng(seed=seed)
    order_numbers = rng.choice(np.arange(1, total_orders + 1), size=min(n, total_orders), replace=False)
    statuses = rng.choice(DISPUTE_STATUSES, size=len(order_numbers), p=DISPUTE_STATUS_WEIGHTS)
    return pl.DataFrame(
        {
            "dispute_id": [f"DSP_{i + 1:05d}" for i in range(len(order_numbers))],
            "order_id": [f"ORD_{int(o):06d}" for o in order_numbers],
            "status": [str(s) for s in statuses],
        },
        schema=DISPUTE_SCHEMA,
    )


# ---------------------------------------------------------------------------
# Region performance dataset (static for the reporting period)
# ---------------------------------------------------------------------------

# (name, country, continent, category, seller_type, shipping_mode,
#  sales, orders, users, buyers, sellers, growth_pct, conversion_rate_pct, lat, lon)
REGIONS = [
    ("Lagos", "Nigeria", "Africa", "electronics", "enterprise", "express",
     482_000, 6_120, 41_000, 28_400, 910, 14.2, 3.8, 6.5244, 3.3792),
    ("Nairobi", "Kenya", "Africa", "marketplace", "independent", "standard",
     268_500, 3_980, 25_300, 17_900, 640, 9.1, 3.1, -1.2921, 36.8219),
    ("Accra", "Ghana", "Africa", "fashion", "independent", "standard",
     154_200, 2_310, 14_800, 10_200, 410, 5.6, 2.9, 5.6037, -0.1870),
    ("Johannesburg", "South Africa", "Africa", "electronics", "enterprise", "express",
     395_700, 4_870, 33_600, 22_100, 780, 2.4, 3.4, -26.2041, 28.0473),
    ("Cairo", "Egypt", "Africa", "logistics", "enterprise", "freight",
     221_900, 2_640, 19_700, 12_800, 350, -3.7, 2.2, 30.0444, 31.2357),
    ("Kigali", "Rwanda", "Africa", "marketplace", "independent", "pickup",
     61_300, 1_120, 6_900, 4_700, 180, 18.5, 4.6, -1.9441, 30.0619),
    ("London", "United Kingdom", "Europe", "fashion", "enterprise", "express",
     612_400, 7_050, 52_300, 36_800, 1_020, 1.2, 4.1, 51.5074, -0.1278),
    ("Berlin", "Germany", "Europe", "electronics", "enterprise", "standard",
     438_800, 5_210, 38_900, 26_500, 860, -9.4, 3.6, 52.5200, 13.4050),
    ("Dubai", "United Arab Emirates", "Asia", "marketplace", "enterprise", "express",
     356_100, 3_940, 27_400, 19_300, 590, 11.8, 4.4, 25.2048, 55.2708),
    ("Mumbai", "India", "Asia", "fashion", "independent", "standard",
     297_600, 6_480, 61_200, 44_700, 1_340, 7.3, 2.7, 19.0760, 72.8777),
    ("Singapore", "Singapore", "Asia", "logistics", "enterprise", "freight",
     188_300, 1_760, 12_100, 8_300, 260, -1.5, 3.0, 1.3521, 103.8198),
    ("New York", "United States", "North America", "electronics", "enterprise", "express",
     705_900, 8_330, 64_800, 45_100, 1_280, 3.1, 4.8, 40.7128, -74.0060),
    ("Toronto", "Canada", "North America", "marketplace", "independent", "standard",
     203_400, 2_580, 18_600, 12_900, 420, -8.0, 2.6, 43.6532, -79.3832),
    ("Sao Paulo", "Brazil", "South America", "fashion", "independent", "pickup",
     176_800, 2_950, 23_500, 16_400, 530, 0.0, 2.1, -23.5505, -46.6333),
]


def build_regions() -> pl.DataFrame:
    columns = list(REGION_SCHEMA.keys())
    float_cols = {c for c, dtype in REGION_SCHEMA.items() if dtype == pl.Float64}
    rows = [
        {c: float(v) if c in float_cols else v for c, v in zip(columns, row)}
        for row in REGIONS
    ]
    return pl.DataFrame(rows, schema=REGION_SCHEMA)


# ---------------------------------------------------------------------------
# Platform revenue series (history + forecast continuation)
# ---------------------------------------------------------------------------

def _point_timestamp(granularity: str, i: int) -> datetime:
    """Timestamp of the i-th point of a series at the given granularity."""
    if granularity == "daily":
        return datetime(2024, 3, 6) + timedelta(days=i)
    if granularity == "weekly":
        return datetime(2024, 1, 1) + timedelta(weeks=i)
    start = datetime(2023, 4, 1)
    month = start.month - 1 + i
    return start.replace(year=start.year + month // 12, month=month % 12 + 1)


def _series(granularity: str, values: list[float], offset: int = 0) -> pl.DataFrame:
    return pl.DataFrame(
        {
            "timestamp": [_point_timestamp(granularity, offset + i) for i in range(len(values))],
            "value": [float(v) for v in values],
        },
        schema=SERIES_SCHEMA,
    )


# granularity -> (history values, forecast values)
REVENUE_SERIES = {
    "daily": (
        [17_400, 18_100, 16_900, 19_300, 21_800, 24_600, 23_200,
         18_900, 19_500, 18_300, 20_700, 22_900, 26_100, 24_800],
        [20_300, 21_000, 21_600, 22_300, 23_100],
    ),
    "weekly": (
        [125_000, 142_000, 138_000, 165_000, 158_000, 189_000,
         205_000, 198_000, 225_000, 245_000, 238_000, 268_000],
        [275_000, 285_000, 295_000, 305_000],
    ),
    "monthly": (
        [512_000, 548_000, 603_000, 587_000, 644_000, 702_000,
         689_000, 751_000, 812_000, 798_000, 876_000, 941_000],
        [968_000, 1_004_000, 1_037_000],
    ),
}


def revenue_series(granularity: str) -> tuple[pl.DataFrame, pl.DataFrame]:
    """Return (history, forecast) for daily, weekly or monthly granularity."""
    if granularity not in REVENUE_SERIES:
        raise ValueError(f"Unknown granularity '{granularity}'. Expected one of {GRANULARITIES}")
    history_values, forecast_values = REVENUE_SERIES[granularity]
    history = _series(granularity, history_values)
    # Forecast continues right after the last historical point
    forecast = _series(granularity, forecast_values, offset=len(history_values))
    return history, forecast


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def print_summary(orders: pl.DataFrame, accounts: pl.DataFrame, products: pl.DataFrame,
                  disputes: pl.DataFrame, regions: pl.DataFrame) -> None:
    print("\n" + "=" * 60)
    print("DATA GENERATOR SUMMARY")
    print("=" * 60)
    print(f"Orders:   {len(orders):,} ({orders['created_at'].null_count()} without timestamp)")
    print(f"Accounts: {len(accounts):,}")
    print(f"Products: {len(products):,}")
    print(f"Disputes: {len(disputes):,} ({disputes.filter(pl.col('status') == 'open').height} open)")
    print(f"Regions:  {len(regions):,}")

    print("\n--- Orders by payment status ---")
    by_payment = (
        orders.group_by("payment_status")
        .agg([pl.len().alias("n"), pl.col("total").sum().alias("total")])
        .sort("payment_status")
    )
    for row in by_payment.iter_rows(named=True):
        print(f"  {row['payment_status']:<10} {row['n']:>6,} orders | ${row['total']:>12,.2f}")
    print("=" * 60)


def main(now: Optional[datetime] = None) -> None:
    print("Generating synthetic data store snapshots...")
    orders = generate_orders(now=now)
    accounts = generate_accounts()
    products = generate_products()
    disputes = generate_disputes()
    regions = build_regions()

    print_summary(orders, accounts, products, disputes, regions)

    os.makedirs("data/raw", exist_ok=True)
    for df, path in (
        (orders, ORDERS_PATH),
        (accounts, ACCOUNTS_PATH),
        (products, PRODUCTS_PATH),
        (disputes, DISPUTES_PATH),
        (regions, REGIONS_PATH),
    ):
        df.write_parquet(path)
        print(f"Saved {len(df):,} rows -> {path}")


if __name__ == "__main__":
    main()
