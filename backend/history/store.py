from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from ..catalogue.adapter import parse_tags
from ..errors import DataAccessError
from ..recommendations.config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from ..recommendations.models import Favorite, OrderLineItem, UserHistory

logger = logging.getLogger(__name__)

ORDER_COLUMNS = ["order_id", "user_id", "status", "completed_at", "dish_id", "quantity", "unit_price"]
FAVORITE_COLUMNS = ["user_id", "dish_id", "category"]
PROFILE_COLUMNS = ["user_id", "dietary_preferences"]

_frames: dict[str, pd.DataFrame] = {}


def _read(path: Path, columns: list[str]) -> pd.DataFrame:
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except FileNotFoundError:
        # A store without this table simply has no rows yet
        logger.info("No history table at %s, treating as empty", path)
        return pd.DataFrame(columns=columns)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        logger.warning("Failed to read history table %s", path, exc_info=True)
        raise DataAccessError(f"history unavailable: {path}") from exc

    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise DataAccessError(f"{path} is missing columns {missing}")
    return df


def load_history_tables(
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> dict[str, pd.DataFrame]:
    orders = _read(config.orders_path, ORDER_COLUMNS)
    orders["status"] = orders["status"].str.strip().str.lower()
    orders["completed_at"] = pd.to_datetime(orders["completed_at"], utc=True, errors="coerce")

    tables = {
        "orders": orders,
        "favorites": _read(config.favorites_path, FAVORITE_COLUMNS),
        "profiles": _read(config.profiles_path, PROFILE_COLUMNS),
    }
    logger.info(
        "Loaded history: %d line items, %d favorites, %d profiles",
        len(tables["orders"]), len(tables["favorites"]), len(tables["profiles"]),
    )
    return tables


def _tables() -> dict[str, pd.DataFrame]:
    if not _frames:
        _frames.update(load_history_tables())
    return _frames


def _to_line_items(orders: pd.DataFrame) -> list[OrderLineItem]:
    items: list[OrderLineItem] = []
    for row in orders.to_dict(orient="records"):
        if pd.isna(row["completed_at"]):
            logger.warning("Skipping line item without completion time (order %s)", row["order_id"])
            continue
        try:
            items.append(OrderLineItem(
                dish_id=row["dish_id"],
                quantity=int(row["quantity"]),
                unit_price=float(row["unit_price"]),
                completed_at=row["completed_at"].to_pydatetime(),
                status=row["status"],
            ))
        except (ValueError, ValidationError):
            logger.warning("Skipping malformed line item in order %s", row["order_id"], exc_info=True)
    return items


def get_delivered_line_items() -> list[OrderLineItem]:
    """All users' delivered line items, oldest table rows first."""
    orders = _tables()["orders"]
    return _to_line_items(orders[orders["status"] == "delivered"])


def get_user_history(user_id: str) -> UserHistory:
    """Assemble the behavioral snapshot for *user_id*.

    Every line item the user placed is included whatever its status;
    consumers that only want delivered food filter on ``status`` themselves.
    Unknown users get an empty history rather than an error.
    """
    tables = _tables()

    orders = tables["orders"]
    user_orders = orders[orders["user_id"] == user_id]

    favorites: list[Favorite] = []
    seen: set[str] = set()
    fav_df = tables["favorites"]
    for row in fav_df[fav_df["user_id"] == user_id].to_dict(orient="records"):
        dish_id = row["dish_id"].strip()
        if not dish_id or dish_id in seen:
            continue
        seen.add(dish_id)
        favorites.append(Favorite(dish_id=dish_id, category=row["category"].strip().lower()))

    profiles = tables["profiles"]
    profile_rows = profiles[profiles["user_id"] == user_id]
    preferences = parse_tags(profile_rows.iloc[0]["dietary_preferences"]) if not profile_rows.empty else []

    return UserHistory(
        user_id=user_id,
        orders=_to_line_items(user_orders),
        favorites=favorites,
        dietary_preferences=preferences,
    )


def reload_history() -> None:
    """Drop cached tables; the next access re-reads from disk."""
    _frames.clear()
