"""
Personalised "for you" ranking.

Scores every in-stock dish against one user's behavioral snapshot and
returns the best-first list with the reasons each dish was picked. Short
lists are topped up by :func:`backfill.backfill_popular`.
"""
from __future__ import annotations

from collections import Counter

from .backfill import POPULAR_REASON, POPULAR_SCORE, backfill_popular
from .models import Dish, RankedDish, Suggestions, UserHistory

DEFAULT_LIMIT = 8

EXCLUDED_SCORE = -1

ORDER_PENALTY = 2
FULL_DIETARY_BONUS = 50
PARTIAL_DIETARY_BONUS = 10
CATEGORY_BONUS = 20
CLOSE_PRICE_BONUS = 15
NEAR_PRICE_BONUS = 5
CLOSE_PRICE_DIFF = 2.0
NEAR_PRICE_DIFF = 5.0

DIETARY_REASON = "Matches your preferences"
CATEGORY_REASON = "Same category as your favorites"
BUDGET_REASON = "Within your usual budget"


def _popular_only(catalogue: list[Dish], limit: int) -> list[RankedDish]:
    """Anonymous path: curated popular dishes, no scoring metadata."""
    popular = [d for d in catalogue if d.is_popular and d.in_stock]
    return [RankedDish(**d.model_dump()) for d in popular[:limit]]


def _average_order_price(history: UserHistory) -> float | None:
    prices = [item.unit_price for item in history.orders]
    if not prices:
        return None
    return sum(prices) / len(prices)


def _score_dish(
    dish: Dish,
    favorite_ids: set[str],
    order_counts: Counter[str],
    preferences: set[str],
    favorite_categories: set[str],
    avg_order_price: float | None,
) -> tuple[int, list[str]]:
    """Compute the personalisation score and reasons for a single dish."""
    if dish.id in favorite_ids:
        return EXCLUDED_SCORE, []

    score = 0
    reasons: list[str] = []

    score -= order_counts[dish.id] * ORDER_PENALTY

    dish_tags = set(dish.dietary_tags)
    matching = preferences & dish_tags
    if preferences and dish_tags and matching == preferences:
        score += FULL_DIETARY_BONUS
        reasons.append(DIETARY_REASON)
    elif matching:
        score += PARTIAL_DIETARY_BONUS * len(matching)

    if dish.category in favorite_categories:
        score += CATEGORY_BONUS
        reasons.append(CATEGORY_REASON)

    if avg_order_price is not None:
        price_diff = abs(dish.price - avg_order_price)
        if price_diff < CLOSE_PRICE_DIFF:
            score += CLOSE_PRICE_BONUS
            reasons.append(BUDGET_REASON)
        elif price_diff < NEAR_PRICE_DIFF:
            score += NEAR_PRICE_BONUS

    if dish.is_popular:
        score += POPULAR_SCORE
        reasons.append(POPULAR_REASON)

    return score, reasons


def rank_personalized(
    catalogue: list[Dish],
    history: UserHistory | None,
    limit: int = DEFAULT_LIMIT,
) -> list[RankedDish]:
    """Rank in-stock dishes for *history*'s user, best first.

    ``history=None`` means no authenticated user: the popular dishes are
    returned in catalogue order without scores.
    """
    if limit < 1:
        return []

    if history is None:
        return _popular_only(catalogue, limit)

    favorite_ids = {fav.dish_id for fav in history.favorites}
    favorite_categories = {fav.category for fav in history.favorites if fav.category}
    preferences = set(history.dietary_preferences)
    avg_order_price = _average_order_price(history)

    order_counts: Counter[str] = Counter()
    for item in history.orders:
        order_counts[item.dish_id] += item.quantity

    scored: list[tuple[int, Dish, list[str]]] = []
    for dish in catalogue:
        if not dish.in_stock:
            continue
        score, reasons = _score_dish(
            dish,
            favorite_ids,
            order_counts,
            preferences,
            favorite_categories,
            avg_order_price,
        )
        if score > 0:
            scored.append((score, dish, reasons))

    # sorted() is stable, equal scores keep catalogue order
    scored.sort(key=lambda entry: entry[0], reverse=True)

    return [
        RankedDish(
            **dish.model_dump(),
            recommendation_score=score,
            recommendation_reasons=reasons,
        )
        for score, dish, reasons in scored[:limit]
    ]


def has_personalized(suggestions: list[RankedDish]) -> bool:
    """True when some item was picked for more than its popularity alone."""
    return any(
        s.recommendation_score is not None and s.recommendation_score > POPULAR_SCORE
        for s in suggestions
    )


def personalized_suggestions(
    catalogue: list[Dish],
    history: UserHistory | None,
    limit: int = DEFAULT_LIMIT,
) -> Suggestions:
    """Scoring engine plus popular backfill, as served on the home feed."""
    ranked = rank_personalized(catalogue, history, limit)

    if history is None:
        return Suggestions(suggestions=ranked, has_personalized_suggestions=False)

    excluded = {fav.dish_id for fav in history.favorites}
    excluded.update(d.id for d in ranked)
    suggestions = backfill_popular(ranked, catalogue, excluded, limit)

    return Suggestions(
        suggestions=suggestions,
        has_personalized_suggestions=bool(suggestions) and has_personalized(suggestions),
        backfilled=len(suggestions) - len(ranked),
    )
