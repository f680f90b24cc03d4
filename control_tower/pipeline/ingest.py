"""
Ingest data store snapshots and validate them against the data contracts.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import polars as pl

from control_tower.contracts.errors import DataUnavailable
from control_tower.contracts.schemas import (
    ACCOUNT_SCHEMA,
    ACCOUNTS_PATH,
    DISPUTE_SCHEMA,
    DISPUTES_PATH,
    ORDER_SCHEMA,
    ORDERS_PATH,
    PRODUCT_SCHEMA,
    PRODUCTS_PATH,
    REGION_SCHEMA,
    REGIONS_PATH,
)


def require_frame(df: Optional[pl.DataFrame], name: str) -> pl.DataFrame:
    """Return df, or raise DataUnavailable when the collection is missing."""
    if df is None:
        raise DataUnavailable(name)
    return df


def validate_columns(df: pl.DataFrame, schema: dict, name: str = "frame") -> None:
    """Raise if df is missing required columns or has incompatible types."""
    for col, dtype in schema.items():
        if col not in df.columns:
            raise ValueError(f"{name}: missing required column: {col}")
        actual = df[col].dtype
        if actual == pl.Null:
            continue
        # Datetime columns may carry any time unit / timezone
        if isinstance(dtype, pl.Datetime):
            if not isinstance(actual, pl.Datetime):
                raise TypeError(f"{name}: column '{col}': expected {dtype}, got {actual}")
        elif dtype.is_numeric():
            if not actual.is_numeric():
                raise TypeError(f"{name}: column '{col}': expected {dtype}, got {actual}")
        elif actual != dtype:
            raise TypeError(f"{name}: column '{col}': expected {dtype}, got {actual}")


def check_frame(df: Optional[pl.DataFrame], schema: dict, name: str) -> pl.DataFrame:
    """require_frame + validate_columns in one step."""
    df = require_frame(df, name)
    validate_columns(df, schema, name)
    return df


def _load_or_generate(path: str, schema: dict, name: str, mock_fn: Callable[[], pl.DataFrame]) -> pl.DataFrame:
    raw_path = Path(path)
    if raw_path.exists():
        df = pl.read_parquet(raw_path)
    else:
        print(f"[ingest] {path} not found — generating mock {name}")
        df = mock_fn()
    validate_columns(df, schema, name)
    return df


def load_orders(now: Optional[datetime] = None) -> pl.DataFrame:
    from control_tower.data_generator.generate import generate_orders

    return _load_or_generate(ORDERS_PATH, ORDER_SCHEMA, "orders", lambda: generate_orders(now=now))


def load_accounts() -> pl.DataFrame:
    from control_tower.data_generator.generate import generate_accounts

    return _load_or_generate(ACCOUNTS_PATH, ACCOUNT_SCHEMA, "accounts", generate_accounts)


def load_products() -> pl.DataFrame:
    from control_tower.data_generator.generate import generate_products

    return _load_or_generate(PRODUCTS_PATH, PRODUCT_SCHEMA, "products", generate_products)


def load_disputes() -> pl.DataFrame:
    from control_tower.data_generator.generate import generate_disputes

    return _load_or_generate(DISPUTES_PATH, DISPUTE_SCHEMA, "disputes", generate_disputes)


def load_regions() -> pl.DataFrame:
    from control_tower.data_generator.generate import build_regions

    return _load_or_generate(REGIONS_PATH, REGION_SCHEMA, "regions", build_regions)


def load_snapshot(now: Optional[datetime] = None) -> dict[str, pl.DataFrame]:
    """
    Load every collection the overview needs. Parquet snapshots under data/raw
    win; anything missing is generated.
    """
    return {
        "orders": load_orders(now),
        "accounts": load_accounts(),
        "products": load_products(),
        "disputes": load_disputes(),
        "regions": load_regions(),
    }
