from __future__ import annotations

from collections.abc import Iterable

from .models import Dish, RankedDish

POPULAR_SCORE = 10
POPULAR_REASON = "Very popular"


def backfill_popular(
    ranked: list[RankedDish],
    catalogue: list[Dish],
    excluded_ids: Iterable[str],
    limit: int,
) -> list[RankedDish]:
    """Top *ranked* up to *limit* with popular in-stock dishes.

    Backfilled entries keep catalogue order, carry the fixed popularity
    score and never repeat an id from *ranked* or *excluded_ids*. Returns
    fewer than *limit* items when the catalogue runs out.
    """
    result = list(ranked[:max(limit, 0)])
    if len(result) >= limit:
        return result

    used = set(excluded_ids)
    used.update(d.id for d in result)

    for dish in catalogue:
        if len(result) >= limit:
            break
        if not dish.is_popular or not dish.in_stock or dish.id in used:
            continue
        used.add(dish.id)
        result.append(RankedDish(
            **dish.model_dump(),
            recommendation_score=POPULAR_SCORE,
            recommendation_reasons=[POPULAR_REASON],
        ))

    return result
