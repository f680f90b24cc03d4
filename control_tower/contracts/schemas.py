"""
Data contracts for the Control Tower analytics layer.

These schemas are the SINGLE SOURCE OF TRUTH for every stage.

Layer flow: data store snapshots -> window filters / geo filters -> rollups -> presentation attributes
"""

import polars as pl


# =============================================================================
# LAYER 1: Data store snapshots (read-only inputs)
# =============================================================================

ORDER_SCHEMA = {
    "order_id": pl.Utf8,
    "created_at": pl.Datetime("us"),   # nullable; rows without it never match a window
    "total": pl.Float64,               # non-negative order amount
    "status": pl.Utf8,                 # pending, processing, shipped, delivered, cancelled
    "payment_status": pl.Utf8,         # pending, completed, failed, refunded
    "seller_id": pl.Utf8,
    "buyer_id": pl.Utf8,
}

ACCOUNT_SCHEMA = {
    "account_id": pl.Utf8,
    "role": pl.Utf8,                   # buyer, seller, admin
    "status": pl.Utf8,                 # active, pending, suspended
}

PRODUCT_SCHEMA = {
    "product_id": pl.Utf8,
    "status": pl.Utf8,                 # active, draft, archived
    "stock_quantity": pl.Int64,
    "low_stock_threshold": pl.Int64,   # null or 0 -> LOW_STOCK_DEFAULT
}

DISPUTE_SCHEMA = {
    "dispute_id": pl.Utf8,
    "order_id": pl.Utf8,
    "status": pl.Utf8,                 # open, under_review, resolved, rejected
}

# One geographic performance bucket for the reporting period
REGION_SCHEMA = {
    "name": pl.Utf8,
    "country": pl.Utf8,
    "continent": pl.Utf8,
    "category": pl.Utf8,
    "seller_type": pl.Utf8,
    "shipping_mode": pl.Utf8,
    "sales": pl.Float64,
    "orders": pl.Int64,
    "users": pl.Int64,
    "buyers": pl.Int64,
    "sellers": pl.Int64,
    "growth_pct": pl.Float64,          # signed
    "conversion_rate_pct": pl.Float64,
    "latitude": pl.Float64,
    "longitude": pl.Float64,
}

SERIES_SCHEMA = {
    "timestamp": pl.Datetime("us"),
    "value": pl.Float64,
}

ORDERS_PATH = "data/raw/orders.parquet"
ACCOUNTS_PATH = "data/raw/accounts.parquet"
PRODUCTS_PATH = "data/raw/products.parquet"
DISPUTES_PATH = "data/raw/disputes.parquet"
REGIONS_PATH = "data/raw/regions.parquet"


# =============================================================================
# LAYER 2: Derived outputs (created per call, never stored)
# =============================================================================

SCALED_SERIES_SCHEMA = {
    "timestamp": pl.Datetime("us"),
    "value": pl.Int64,
}

MARKER_SCHEMA = {
    "name": pl.Utf8,
    "latitude": pl.Float64,
    "longitude": pl.Float64,
    "sales": pl.Float64,
    "growth_pct": pl.Float64,
    "intensity": pl.Float64,           # 0.0 - 1.0
    "altitude": pl.Float64,
    "radius": pl.Float64,
    "color_tier": pl.Utf8,             # accelerating, growing, declining, cooling, flat
}

TOP_SELLER_SCHEMA = {
    "seller_id": pl.Utf8,
    "revenue": pl.Float64,             # completed-payment order totals
    "orders": pl.Int64,
}

ROLLUP_WINDOWS = ["today", "week", "month", "previous_week", "previous_month"]


# =============================================================================
# CONSTANTS (shared across all stages)
# =============================================================================

ORDER_STATUSES = ["pending", "processing", "shipped", "delivered", "cancelled"]
PAYMENT_STATUSES = ["pending", "completed", "failed", "refunded"]
CLOSED_ORDER_STATUSES = ["delivered", "cancelled"]

ACCOUNT_ROLES = ["buyer", "seller", "admin"]
ACCOUNT_STATUSES = ["active", "pending", "suspended"]
DISPUTE_STATUSES = ["open", "under_review", "resolved", "rejected"]

# Revenue rollup multipliers applied to the month total
REVENUE_MARKUP = 1.15
REFUND_RATE = 0.03

# Category -> multiplier applied to the platform revenue series
CATEGORY_WEIGHTS = {
    "all": 1.0,
    "electronics": 1.15,
    "fashion": 0.82,
    "marketplace": 0.65,
    "logistics": 0.38,
}

GRANULARITIES = ["daily", "weekly", "monthly"]
TIME_RANGES = ["today", "week", "month"]

# Positional series annotations: (index into history, label, kind)
SERIES_ANNOTATIONS = [
    (1, "Major Campaign", "lift"),
    (-1, "Platform Update", "platform_change"),
]

# Geo filter dimensions, in evaluation order
WILDCARD = "all"
FILTER_DIMENSIONS = ["continent", "country", "category", "seller_type", "shipping_mode"]

# Growth breakpoints for marker color tiers
GROWTH_ACCELERATING_MIN = 10.0
GROWTH_GROWING_MIN = 4.0
GROWTH_DECLINING_MAX = -8.0

# Marker geometry: value = base + relative * span
MARKER_ALTITUDE_BASE = 0.12
MARKER_ALTITUDE_SPAN = 0.28
MARKER_RADIUS_BASE = 0.04
MARKER_RADIUS_SPAN = 0.08

LOW_STOCK_DEFAULT = 5

# Overview activity lists
RECENT_ORDERS_LIMIT = 10
TOP_SELLERS_LIMIT = 5
