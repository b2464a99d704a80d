from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pandas as pd

from .models import Dish, OrderLineItem

DEFAULT_TRENDING_LIMIT = 8
DEFAULT_WINDOW_DAYS = 7
DEFAULT_NEW_LIMIT = 6

DELIVERED = "delivered"


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def aggregate_window(
    line_items: list[OrderLineItem],
    window_days: int = DEFAULT_WINDOW_DAYS,
    now: datetime | None = None,
) -> pd.Series:
    """Sum delivered quantities per dish over the trailing window.

    Returns a Series indexed by dish id, sorted by quantity descending.
    Dishes with equal totals keep the order they were first seen in.
    """
    now = _as_utc(now or datetime.now(timezone.utc))
    cutoff = now - timedelta(days=window_days)

    rows = [
        {"dish_id": item.dish_id, "quantity": item.quantity}
        for item in line_items
        if item.status == DELIVERED and _as_utc(item.completed_at) >= cutoff
    ]
    if not rows:
        return pd.Series(dtype="int64", name="quantity")

    df = pd.DataFrame(rows)
    counts = df.groupby("dish_id", sort=False)["quantity"].sum()
    return counts.sort_values(ascending=False, kind="stable")


def trending_dishes(
    catalogue: list[Dish],
    line_items: list[OrderLineItem],
    limit: int = DEFAULT_TRENDING_LIMIT,
    window_days: int = DEFAULT_WINDOW_DAYS,
    now: datetime | None = None,
) -> list[Dish]:
    """Dishes ranked by ordered quantity over the last *window_days*.

    Ids no longer in the catalogue are dropped, so fewer than *limit*
    dishes may come back. An empty window falls back to the first *limit*
    in-stock dishes in catalogue order.
    """
    if limit < 1:
        return []

    counts = aggregate_window(line_items, window_days, now)
    if counts.empty:
        return [d for d in catalogue if d.in_stock][:limit]

    by_id = {d.id: d for d in catalogue}
    top_ids = counts.head(limit).index.tolist()
    return [by_id[dish_id] for dish_id in top_ids if dish_id in by_id]


def new_arrivals(catalogue: list[Dish], limit: int = DEFAULT_NEW_LIMIT) -> list[Dish]:
    """Most recently added in-stock dishes first; undated dishes last."""
    if limit < 1:
        return []

    in_stock = [d for d in catalogue if d.in_stock]
    dated = [d for d in in_stock if d.created_at is not None]
    undated = [d for d in in_stock if d.created_at is None]
    dated.sort(key=lambda d: _as_utc(d.created_at), reverse=True)
    return (dated + undated)[:limit]
