"""
Order-history picks.

Unlike the "for you" feed, which favours discovery, this ranking boosts what
the user already orders and likes, plus dishes close to those orders. The
boost is damped for dishes ordered more than a few times. Only delivered
line items count as having been ordered.
"""
from __future__ import annotations

from collections import Counter

from .models import Dish, RankedDish, UserHistory
from .similarity import dish_affinity

DEFAULT_HISTORY_LIMIT = 12

FAVORITE_REASON = "One of your favorites"
CLASSIC_REASON = "One of your classics"
REORDER_REASON = "You have enjoyed this before"
PREFERENCE_REASON = "Matches your preferences"
DISCOVER_REASON = "Discover this dish"


def _reason(
    order_count: int,
    is_favorite: bool,
    matching_preferences: int,
) -> str:
    if is_favorite:
        return FAVORITE_REASON
    if order_count > 5:
        return CLASSIC_REASON
    if order_count > 0:
        return REORDER_REASON
    if matching_preferences > 0:
        return PREFERENCE_REASON
    return DISCOVER_REASON


def history_picks(
    catalogue: list[Dish],
    history: UserHistory | None,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> list[RankedDish]:
    if history is None or limit < 1:
        return []

    available = [d for d in catalogue if d.in_stock]
    by_id = {d.id: d for d in available}

    order_counts: Counter[str] = Counter()
    for item in history.orders:
        if item.status == "delivered":
            order_counts[item.dish_id] += item.quantity

    favorite_ids = {fav.dish_id for fav in history.favorites}
    preferences = set(history.dietary_preferences)

    # Only previously ordered dishes still on sale contribute affinity
    ordered = [(by_id[dish_id], count) for dish_id, count in order_counts.items() if dish_id in by_id]

    scored: list[tuple[float, Dish, str]] = []
    for dish in available:
        order_count = order_counts[dish.id]
        is_favorite = dish.id in favorite_ids
        matching = len(preferences & set(dish.dietary_tags))

        score = 1.0
        score += order_count * 5
        if is_favorite:
            score += 10
        score += matching * 3
        for previous, count in ordered:
            score += dish_affinity(dish, previous) * count

        if order_count > 3:
            score *= 0.7

        scored.append((score, dish, _reason(order_count, is_favorite, matching)))

    scored.sort(key=lambda entry: entry[0], reverse=True)

    return [
        RankedDish(
            **dish.model_dump(),
            recommendation_score=round(score, 4),
            recommendation_reasons=[reason],
        )
        for score, dish, reason in scored[:limit]
    ]
