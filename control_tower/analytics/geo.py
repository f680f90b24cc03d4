"""
Geographic rollup for the control tower map.

Filters the region performance dataset by continent / country / category /
seller type / shipping mode, then aggregates totals, ranking and extremes.

Product rule: when a filter combination matches nothing, every aggregate is
computed over the full collection instead (see with_fallback).
"""

from typing import Optional

import polars as pl

from control_tower.contracts.schemas import FILTER_DIMENSIONS, REGION_SCHEMA, WILDCARD
from control_tower.pipeline.ingest import check_frame


def default_filters() -> dict:
    """All-wildcard FilterSet."""
    return {dim: WILDCARD for dim in FILTER_DIMENSIONS}


def _active_constraints(filters: Optional[dict]) -> list[tuple[str, str]]:
    if not filters:
        return []
    unknown = set(filters) - set(FILTER_DIMENSIONS)
    if unknown:
        raise ValueError(f"Unknown filter dimension(s): {sorted(unknown)}")
    return [
        (dim, filters[dim])
        for dim in FILTER_DIMENSIONS
        if filters.get(dim) not in (None, WILDCARD)
    ]


def apply_filters(regions: pl.DataFrame, filters: Optional[dict] = None) -> pl.DataFrame:
    """
    AND of every non-wildcard dimension constraint (exact match).
    An all-wildcard FilterSet returns the input unchanged.
    """
    regions = check_frame(regions, REGION_SCHEMA, "regions")
    constraints = _active_constraints(filters)
    if not constraints:
        return regions
    expr = pl.lit(True)
    for dim, value in constraints:
        expr = expr & (pl.col(dim) == value).fill_null(False)
    return regions.filter(expr)


def with_fallback(filtered: pl.DataFrame, regions: pl.DataFrame) -> pl.DataFrame:
    """Substitute the full collection when the filtered set is empty."""
    return regions if filtered.height == 0 else filtered


def rank_by_sales(regions: pl.DataFrame) -> pl.DataFrame:
    # maintain_order keeps ties in input order
    return regions.sort("sales", descending=True, maintain_order=True)


def distinct_countries(regions: pl.DataFrame) -> list[str]:
    """Unique countries over the unfiltered collection, first-seen order."""
    regions = check_frame(regions, REGION_SCHEMA, "regions")
    return regions["country"].drop_nulls().unique(maintain_order=True).to_list()


def filter_options(regions: pl.DataFrame) -> dict[str, list[str]]:
    """Choices for every filter dimension, wildcard first."""
    regions = check_frame(regions, REGION_SCHEMA, "regions")
    return {
        dim: [WILDCARD] + regions[dim].drop_nulls().unique(maintain_order=True).to_list()
        for dim in FILTER_DIMENSIONS
    }


def _int_sum(df: pl.DataFrame, col: str) -> int:
    return int(df[col].fill_null(0).sum()) if df.height else 0


def summarize_regions(regions: pl.DataFrame, filters: Optional[dict] = None) -> dict:
    """
    Filter, fall back if empty, and aggregate.

    Totals, active_region_count, ranking, highest/lowest and
    average_growth_pct are all computed over `display` (the filtered set, or
    the full collection when the filter matched nothing).
    """
    regions = check_frame(regions, REGION_SCHEMA, "regions")
    filtered = apply_filters(regions, filters)
    display = with_fallback(filtered, regions)
    ranking = rank_by_sales(display)

    highest = ranking.row(0, named=True) if ranking.height else None
    lowest = ranking.row(ranking.height - 1, named=True) if ranking.height else None
    average_growth = float(display["growth_pct"].fill_null(0.0).mean()) if display.height else 0.0

    return {
        "filters": {**default_filters(), **(filters or {})},
        "filtered": filtered,
        "display": display,
        "is_fallback": filtered.height == 0,
        "total_sales": float(display["sales"].fill_null(0.0).sum()) if display.height else 0.0,
        "total_orders": _int_sum(display, "orders"),
        "total_sellers": _int_sum(display, "sellers"),
        "total_buyers": _int_sum(display, "buyers"),
        "active_region_count": display.height,
        "ranking": ranking,
        "highest": highest,
        "lowest": lowest,
        "average_growth_pct": average_growth,
        "countries": distinct_countries(regions),
    }
