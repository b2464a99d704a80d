from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from ..errors import DataAccessError
from ..recommendations.config import DEFAULT_RECOMMENDATION_CONFIG
from ..recommendations.models import Dish
from .adapter import normalize_dish_record

logger = logging.getLogger(__name__)

_dishes: list[Dish] | None = None


def load_catalogue(path: Path) -> list[Dish]:
    try:
        df = pd.read_csv(path, dtype={"id": str})
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        logger.warning("Failed to read catalogue from %s", path, exc_info=True)
        raise DataAccessError(f"catalogue unavailable: {path}") from exc

    dishes: list[Dish] = []
    for record in df.to_dict(orient="records"):
        try:
            dishes.append(normalize_dish_record(record))
        except (ValueError, ValidationError):
            logger.warning("Skipping malformed dish record %r", record.get("id"), exc_info=True)

    logger.info("Loaded %d dishes from %s", len(dishes), path)
    return dishes


def get_catalogue() -> list[Dish]:
    """Return the catalogue snapshot, loading it on first call."""
    global _dishes
    if _dishes is None:
        _dishes = load_catalogue(DEFAULT_RECOMMENDATION_CONFIG.dishes_path)
    return _dishes


def get_dish(dish_id: str) -> Dish | None:
    return next((d for d in get_catalogue() if d.id == dish_id), None)


def reload_catalogue() -> None:
    """Drop the cached snapshot; the next access re-reads from disk."""
    global _dishes
    _dishes = None
