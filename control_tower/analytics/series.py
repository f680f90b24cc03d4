"""
Category-weighted revenue series for the "Platform Revenue Trend & Forecast"
chart.

The platform-wide series is scaled by a fixed per-category multiplier so the
chart can show category-scoped figures. History and forecast are scaled
separately by the same weight, so their relative shape is preserved.
"""

import polars as pl

from control_tower.contracts.schemas import (
    CATEGORY_WEIGHTS,
    SCALED_SERIES_SCHEMA,
    SERIES_ANNOTATIONS,
    SERIES_SCHEMA,
)
from control_tower.pipeline.ingest import check_frame


def category_weight(category: str, weights: dict = CATEGORY_WEIGHTS) -> float:
    if category not in weights:
        raise ValueError(f"Unknown category '{category}'. Expected one of {sorted(weights)}")
    return float(weights[category])


def _prepare_series(series: pl.DataFrame, name: str) -> pl.DataFrame:
    """Validate, sort ascending and reject duplicate timestamps."""
    series = check_frame(series, SERIES_SCHEMA, name)
    if series["timestamp"].is_duplicated().any():
        raise ValueError(f"{name}: series contains duplicate timestamps")
    return series.select(list(SERIES_SCHEMA.keys())).sort("timestamp")


def scale_values(series: pl.DataFrame, weight: float) -> pl.DataFrame:
    """Multiply every value by weight and round to the nearest whole unit, halves up."""
    return series.with_columns(
        (pl.col("value") * weight + 0.5).floor().cast(pl.Int64).alias("value")
    ).cast(SCALED_SERIES_SCHEMA)


def series_annotations(history: pl.DataFrame, annotations: list = SERIES_ANNOTATIONS) -> list[dict]:
    """
    Pick annotation points by position in the (scaled) history. Positions that
    do not exist in a short history are skipped.
    """
    n = history.height
    points = []
    for index, label, kind in annotations:
        if not -n <= index < n:
            continue
        row = history.row(index % n, named=True)
        points.append({
            "timestamp": row["timestamp"],
            "value": row["value"],
            "label": label,
            "kind": kind,
        })
    return points


def scale_series(
    history: pl.DataFrame,
    forecast: pl.DataFrame,
    category: str,
    *,
    weights: dict = CATEGORY_WEIGHTS,
    annotations: list = SERIES_ANNOTATIONS,
) -> dict:
    """
    Scale a historical series and its forecast continuation by the category
    weight.

    Returns {"category", "weight", "history", "forecast", "annotations"}.
    """
    weight = category_weight(category, weights)
    scaled_history = scale_values(_prepare_series(history, "history"), weight)
    scaled_forecast = scale_values(_prepare_series(forecast, "forecast"), weight)
    return {
        "category": category,
        "weight": weight,
        "history": scaled_history,
        "forecast": scaled_forecast,
        "annotations": series_annotations(scaled_history, annotations),
    }
