"""
Headline platform counters for the control tower: orders, accounts by role,
pending seller approvals, low-stock products and open disputes. Also the
recent-orders feed and the top-sellers list shown beside them.
"""

from typing import Optional

import polars as pl

from control_tower.contracts.schemas import (
    ACCOUNT_SCHEMA,
    CLOSED_ORDER_STATUSES,
    DISPUTE_SCHEMA,
    LOW_STOCK_DEFAULT,
    ORDER_SCHEMA,
    PRODUCT_SCHEMA,
    RECENT_ORDERS_LIMIT,
    TOP_SELLER_SCHEMA,
    TOP_SELLERS_LIMIT,
)
from control_tower.pipeline.ingest import check_frame, validate_columns
from control_tower.pipeline.transform import StatusMatch, filter_window


def _count(df: pl.DataFrame, expr: pl.Expr) -> int:
    return df.filter(expr.fill_null(False)).height


def account_counts(accounts: Optional[pl.DataFrame]) -> dict:
    if accounts is None:
        return {"total_users": 0, "total_sellers": 0, "total_buyers": 0, "pending_approvals": 0}
    validate_columns(accounts, ACCOUNT_SCHEMA, "accounts")
    return {
        "total_users": accounts.height,
        "total_sellers": _count(accounts, pl.col("role") == "seller"),
        "total_buyers": _count(accounts, pl.col("role") == "buyer"),
        "pending_approvals": _count(
            accounts, (pl.col("role") == "seller") & (pl.col("status") == "pending")
        ),
    }


def product_counts(products: Optional[pl.DataFrame], low_stock_default: int = LOW_STOCK_DEFAULT) -> dict:
    if products is None:
        return {"total_products": 0, "low_stock_alerts": 0}
    validate_columns(products, PRODUCT_SCHEMA, "products")
    # A missing or zero threshold means "use the platform default"
    threshold = (
        pl.when(pl.col("low_stock_threshold").fill_null(0) == 0)
          .then(pl.lit(low_stock_default))
          .otherwise(pl.col("low_stock_threshold"))
    )
    low_stock = (pl.col("status") == "active") & (pl.col("stock_quantity") <= threshold)
    return {
        "total_products": products.height,
        "low_stock_alerts": _count(products, low_stock),
    }


def dispute_counts(disputes: Optional[pl.DataFrame]) -> dict:
    if disputes is None:
        return {"active_disputes": 0}
    validate_columns(disputes, DISPUTE_SCHEMA, "disputes")
    return {"active_disputes": _count(disputes, pl.col("status") == "open")}


def platform_counts(
    orders: pl.DataFrame,
    accounts: Optional[pl.DataFrame] = None,
    products: Optional[pl.DataFrame] = None,
    disputes: Optional[pl.DataFrame] = None,
    *,
    low_stock_default: int = LOW_STOCK_DEFAULT,
) -> dict:
    """
    Orders are required; accounts, products and disputes are optional and
    count as zero when not supplied.
    """
    orders = check_frame(orders, ORDER_SCHEMA, "orders")
    return {
        "total_orders": orders.height,
        "active_orders": _count(orders, ~pl.col("status").is_in(CLOSED_ORDER_STATUSES)),
        **account_counts(accounts),
        **product_counts(products, low_stock_default),
        **dispute_counts(disputes),
    }


def recent_orders(orders: pl.DataFrame, limit: int = RECENT_ORDERS_LIMIT) -> pl.DataFrame:
    """Newest orders first. Rows without a timestamp sort last."""
    orders = check_frame(orders, ORDER_SCHEMA, "orders")
    return (
        orders.sort("created_at", descending=True, nulls_last=True, maintain_order=True)
        .head(limit)
    )


def top_sellers(
    orders: pl.DataFrame,
    limit: int = TOP_SELLERS_LIMIT,
    payment_status: StatusMatch = "completed",
) -> pl.DataFrame:
    """
    Sellers ranked by paid order revenue, ties broken by seller_id. Orders
    without a timestamp are left out, as in every revenue figure.
    """
    paid = filter_window(orders, payment_status=payment_status)
    return (
        paid.filter(pl.col("seller_id").is_not_null())
        .group_by("seller_id")
        .agg([
            pl.col("total").fill_null(0.0).sum().alias("revenue"),
            pl.len().alias("orders"),
        ])
        .sort(["revenue", "seller_id"], descending=[True, False])
        .head(limit)
        .cast(TOP_SELLER_SCHEMA)
    )
