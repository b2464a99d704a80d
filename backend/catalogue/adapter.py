"""
Normalise raw dish records into the canonical ``Dish`` schema.

Storefront exports name the same field differently depending on their age
(``category`` vs ``category_id``, ``dietary_tags`` vs ``dietaryTags``...).
All of that is resolved here so the ranking code only ever sees ``Dish``.
"""
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Mapping

import pandas as pd

from ..recommendations.models import Dish

CANONICAL_COLUMNS: list[str] = [
    "id",
    "name",
    "price",
    "category",
    "dietary_tags",
    "stock",
    "is_popular",
    "description",
    "created_at",
]

_TRUE_STRINGS = {"true", "1", "yes", "y", "t"}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float) and math.isnan(value):
        return True
    return value is pd.NaT


def _first_present(record: Mapping[str, Any], keys: list[str]) -> Any:
    for key in keys:
        if key in record and not _is_missing(record[key]):
            return record[key]
    return None


def parse_tags(raw: Any) -> list[str]:
    """Accept a list or a comma-separated string; lower-case, strip, dedupe."""
    if _is_missing(raw):
        return []
    if isinstance(raw, str):
        items = raw.split(",")
    else:
        items = list(raw)
    tags: list[str] = []
    for item in items:
        tag = str(item).strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def parse_bool(raw: Any) -> bool:
    if _is_missing(raw):
        return False
    if isinstance(raw, str):
        return raw.strip().lower() in _TRUE_STRINGS
    return bool(raw)


def _parse_datetime(raw: Any) -> datetime | None:
    if _is_missing(raw):
        return None
    ts = pd.to_datetime(raw, utc=True, errors="coerce")
    if ts is pd.NaT or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _resolve_category(
    record: Mapping[str, Any],
    category_map: Mapping[str, str] | None,
) -> str:
    slug = _first_present(record, ["category", "category_slug"])
    if slug is not None and str(slug).strip():
        return str(slug).strip().lower()

    category_id = _first_present(record, ["category_id"])
    if category_id is not None and category_map:
        return category_map.get(str(category_id), "")
    return ""


def _resolve_stock(record: Mapping[str, Any]) -> int:
    stock = _first_present(record, ["stock", "stock_count"])
    if stock is not None:
        count = float(stock)
        if not math.isfinite(count):
            raise ValueError(f"stock {stock!r} is not a finite number")
        return max(0, int(count))

    available = _first_present(record, ["is_available", "isAvailable"])
    if available is not None:
        return 1 if parse_bool(available) else 0
    return 0


def normalize_dish_record(
    record: Mapping[str, Any],
    category_map: Mapping[str, str] | None = None,
) -> Dish:
    """Map one raw record onto ``Dish``.

    *category_map* resolves legacy ``category_id`` references to category
    slugs. Raises ``ValueError`` (pydantic ``ValidationError``) when the
    record lacks an id, a usable price or a finite stock count.
    """
    price = _first_present(record, ["price", "unit_price"])
    if price is None:
        raise ValueError(f"dish record {record.get('id')!r} has no price")

    description = _first_present(record, ["description"])

    return Dish(
        id=str(_first_present(record, ["id"]) or "").strip(),
        name=str(_first_present(record, ["name"]) or "").strip(),
        price=float(price),
        category=_resolve_category(record, category_map),
        dietary_tags=parse_tags(_first_present(record, ["dietary_tags", "dietaryTags", "tags"])),
        stock=_resolve_stock(record),
        is_popular=parse_bool(_first_present(record, ["is_popular", "isPopular"])),
        description=str(description) if description is not None else None,
        created_at=_parse_datetime(_first_present(record, ["created_at", "createdAt"])),
    )


def dish_to_row(dish: Dish) -> dict[str, Any]:
    """Flatten a ``Dish`` into a CSV row in ``CANONICAL_COLUMNS`` order."""
    return {
        "id": dish.id,
        "name": dish.name,
        "price": dish.price,
        "category": dish.category,
        "dietary_tags": ",".join(dish.dietary_tags),
        "stock": dish.stock,
        "is_popular": dish.is_popular,
        "description": dish.description or "",
        "created_at": dish.created_at.isoformat() if dish.created_at else "",
    }
