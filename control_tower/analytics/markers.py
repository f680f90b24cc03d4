"""
Map marker attributes per region: a size/intensity value scaled against the
largest region in view, and a discrete color tier from growth.
"""

import polars as pl

from control_tower.contracts.schemas import (
    GROWTH_ACCELERATING_MIN,
    GROWTH_DECLINING_MAX,
    GROWTH_GROWING_MIN,
    MARKER_ALTITUDE_BASE,
    MARKER_ALTITUDE_SPAN,
    MARKER_RADIUS_BASE,
    MARKER_RADIUS_SPAN,
    MARKER_SCHEMA,
    REGION_SCHEMA,
)
from control_tower.pipeline.ingest import check_frame

# Evaluated top to bottom, first match wins. The order is part of the
# contract: -9 is both "<= -8" and "< 0" and must land in "declining".
# Predicates take a float or a polars expression.
GROWTH_TIERS = [
    (lambda g: g >= GROWTH_ACCELERATING_MIN, "accelerating"),
    (lambda g: g >= GROWTH_GROWING_MIN, "growing"),
    (lambda g: g <= GROWTH_DECLINING_MAX, "declining"),
    (lambda g: g < 0, "cooling"),
]
DEFAULT_TIER = "flat"


def classify_growth(growth_pct: float, tiers: list = GROWTH_TIERS, default: str = DEFAULT_TIER) -> str:
    for predicate, tier in tiers:
        if predicate(growth_pct):
            return tier
    return default


def relative_intensity(sales: float, max_sales: float) -> float:
    """sales / max_sales clamped to [0, 1]; 0 when max_sales is 0."""
    if not max_sales or max_sales <= 0:
        return 0.0
    return min(1.0, max(0.0, sales / max_sales))


def marker_attributes(
    sales: float,
    growth_pct: float,
    max_sales: float,
    *,
    altitude_base: float = MARKER_ALTITUDE_BASE,
    altitude_span: float = MARKER_ALTITUDE_SPAN,
    radius_base: float = MARKER_RADIUS_BASE,
    radius_span: float = MARKER_RADIUS_SPAN,
    tiers: list = GROWTH_TIERS,
) -> dict:
    relative = relative_intensity(sales, max_sales)
    return {
        "intensity": relative,
        "altitude": altitude_base + relative * altitude_span,
        "radius": radius_base + relative * radius_span,
        "color_tier": classify_growth(growth_pct, tiers),
    }


def tier_expr(growth: pl.Expr, tiers: list = GROWTH_TIERS, default: str = DEFAULT_TIER) -> pl.Expr:
    """The tier table as a when/then chain over a growth column."""
    if not tiers:
        return pl.lit(default)
    (first, tier), rest = tiers[0], tiers[1:]
    expr = pl.when(first(growth)).then(pl.lit(tier))
    for predicate, tier in rest:
        expr = expr.when(predicate(growth)).then(pl.lit(tier))
    return expr.otherwise(pl.lit(default))


def derive_markers(
    regions: pl.DataFrame,
    *,
    altitude_base: float = MARKER_ALTITUDE_BASE,
    altitude_span: float = MARKER_ALTITUDE_SPAN,
    radius_base: float = MARKER_RADIUS_BASE,
    radius_span: float = MARKER_RADIUS_SPAN,
    tiers: list = GROWTH_TIERS,
) -> pl.DataFrame:
    """
    One marker row per region, scaled against the maximum sales in `regions`.
    Pass the display set (filtered, or the fallback collection).
    """
    regions = check_frame(regions, REGION_SCHEMA, "regions")
    max_sales = float(regions["sales"].max() or 0.0) if regions.height else 0.0

    sales = pl.col("sales").fill_null(0.0)
    growth = pl.col("growth_pct").fill_null(0.0)
    if max_sales > 0:
        intensity = (sales / max_sales).clip(0.0, 1.0)
    else:
        intensity = pl.lit(0.0)

    return (
        regions.select([
            pl.col("name"),
            pl.col("latitude"),
            pl.col("longitude"),
            sales.alias("sales"),
            growth.alias("growth_pct"),
            intensity.alias("intensity"),
        ])
        .with_columns([
            (altitude_base + pl.col("intensity") * altitude_span).alias("altitude"),
            (radius_base + pl.col("intensity") * radius_span).alias("radius"),
            tier_expr(pl.col("growth_pct"), tiers).alias("color_tier"),
        ])
        .cast(MARKER_SCHEMA)
        .select(list(MARKER_SCHEMA))
    )
