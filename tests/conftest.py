import sys
from datetime import datetime, timedelta
from pathlib import Path

import polars as pl
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from control_tower.contracts.schemas import ORDER_SCHEMA, REGION_SCHEMA, SERIES_SCHEMA  # noqa: E402

NOW = datetime(2024, 5, 15, 14, 30)


def make_orders(rows: list[dict]) -> pl.DataFrame:
    """Build an orders frame; unspecified columns get neutral defaults."""
    defaults = {
        "order_id": None,
        "created_at": None,
        "total": 0.0,
        "status": "delivered",
        "payment_status": "completed",
        "seller_id": "SELLER_0001",
        "buyer_id": "BUYER_00001",
    }
    records = []
    for i, row in enumerate(rows):
        record = {**defaults, "order_id": f"ORD_{i + 1:06d}", **row}
        record["total"] = float(record["total"])
        records.append(record)
    return pl.DataFrame(records, schema=ORDER_SCHEMA)


def make_region(name: str, continent: str, sales: float, growth_pct: float = 0.0, /, **overrides) -> dict:
    region = {
        "name": name,
        "country": f"{name} Country",
        "continent": continent,
        "category": "marketplace",
        "seller_type": "independent",
        "shipping_mode": "standard",
        "sales": float(sales),
        "orders": 100,
        "users": 1_000,
        "buyers": 600,
        "sellers": 40,
        "growth_pct": float(growth_pct),
        "conversion_rate_pct": 2.5,
        "latitude": 0.0,
        "longitude": 0.0,
    }
    region.update(overrides)
    return region


def make_regions(rows: list[dict]) -> pl.DataFrame:
    return pl.DataFrame(rows, schema=REGION_SCHEMA)


def make_series(start: datetime, values: list[float], step: timedelta = timedelta(weeks=1)) -> pl.DataFrame:
    return pl.DataFrame(
        {
            "timestamp": [start + step * i for i in range(len(values))],
            "value": [float(v) for v in values],
        },
        schema=SERIES_SCHEMA,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def ten_regions() -> pl.DataFrame:
    """10 regions, 6 of them in Africa."""
    rows = [
        make_region("Lagos", "Africa", 500, 14.0, country="Nigeria", category="electronics",
                    orders=50, sellers=5, buyers=30),
        make_region("Abuja", "Africa", 120, 3.0, country="Nigeria", orders=12, sellers=2, buyers=8),
        make_region("Nairobi", "Africa", 300, 9.0, country="Kenya", orders=30, sellers=4, buyers=20),
        make_region("Accra", "Africa", 150, -2.0, country="Ghana", category="fashion",
                    orders=15, sellers=3, buyers=10, shipping_mode="express"),
        make_region("Cairo", "Africa", 220, -9.0, country="Egypt", category="logistics",
                    orders=22, sellers=2, buyers=14, seller_type="enterprise"),
        make_region("Kigali", "Africa", 60, 20.0, country="Rwanda", orders=6, sellers=1, buyers=4),
        make_region("London", "Europe", 900, 1.0, country="United Kingdom", category="fashion",
                    orders=90, sellers=9, buyers=60, seller_type="enterprise"),
        make_region("Berlin", "Europe", 400, -10.0, country="Germany", category="electronics",
                    orders=40, sellers=6, buyers=25),
        make_region("Mumbai", "Asia", 350, 7.0, country="India", orders=70, sellers=8, buyers=50),
        make_region("Toronto", "North America", 250, 0.0, country="Canada", orders=25, sellers=3, buyers=18),
    ]
    return make_regions(rows)
