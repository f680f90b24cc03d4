"""
Record classifier and window filter over order snapshots.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Optional, Union

import polars as pl
from dateutil import tz

from control_tower.contracts.schemas import ORDER_SCHEMA
from control_tower.pipeline.ingest import check_frame

StatusMatch = Optional[Union[str, Iterable[str]]]


def _status_expr(column: str, accepted: StatusMatch) -> Optional[pl.Expr]:
    if accepted is None:
        return None
    if isinstance(accepted, str):
        return pl.col(column) == accepted
    return pl.col(column).is_in(list(accepted))


def _column_time_zone(orders: pl.DataFrame) -> Optional[str]:
    dtype = orders.schema["created_at"]
    return dtype.time_zone if isinstance(dtype, pl.Datetime) else None


def _wall_time(value: Optional[datetime], time_zone: Optional[str]) -> Optional[datetime]:
    """
    Express a window boundary as naive wall-clock time. Aware boundaries are
    converted into the column's zone first; naive ones are taken as already
    being in it.
    """
    if value is None or value.tzinfo is None:
        return value
    if time_zone is not None:
        value = value.astimezone(tz.gettz(time_zone))
    return value.replace(tzinfo=None)


def window_expr(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    time_zone: Optional[str] = None,
) -> pl.Expr:
    """
    Half-open [start, end) membership on created_at. Null timestamps never match.

    When created_at carries a time zone, pass it as `time_zone`: the column is
    compared as wall-clock time in that zone.
    """
    created_at = pl.col("created_at")
    if time_zone is not None:
        created_at = created_at.dt.replace_time_zone(None)
    start, end = _wall_time(start, time_zone), _wall_time(end, time_zone)

    expr = created_at.is_not_null()
    if start is not None:
        expr = expr & (created_at >= start)
    if end is not None:
        expr = expr & (created_at < end)
    return expr


def filter_window(
    orders: pl.DataFrame,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    payment_status: StatusMatch = None,
    status: StatusMatch = None,
) -> pl.DataFrame:
    """
    Return the orders created in [start, end) whose payment_status and status
    match. Each status argument takes a single value, a collection of accepted
    values, or None for any.

    Timezone-aware created_at columns are matched on their local wall-clock
    time, so the naive boundaries from resolve_boundaries work against both.
    """
    orders = check_frame(orders, ORDER_SCHEMA, "orders")
    expr = window_expr(start, end, _column_time_zone(orders))
    for column, accepted in (("payment_status", payment_status), ("status", status)):
        status_expr = _status_expr(column, accepted)
        if status_expr is not None:
            # fill_null: a null status is simply not a match
            expr = expr & status_expr.fill_null(False)
    return orders.filter(expr)


def sum_total(orders: pl.DataFrame) -> float:
    """Sum of order totals; 0.0 for an empty frame."""
    if orders.height == 0:
        return 0.0
    return float(orders["total"].fill_null(0.0).sum())
