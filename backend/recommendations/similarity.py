from __future__ import annotations

from .models import Dish, SimilarDish

DEFAULT_SIMILAR_LIMIT = 4

BASE_SIMILARITY = 1.0
TAG_OVERLAP_WEIGHT = 5.0
CLOSE_PRICE_SIMILARITY = 3.0
NEAR_PRICE_SIMILARITY = 1.0
CLOSE_PRICE_DIFF = 2.0
NEAR_PRICE_DIFF = 5.0


def tag_overlap(a: list[str], b: list[str]) -> float:
    """Shared tags as a fraction of the larger tag set (0.0 to 1.0)."""
    common = set(a) & set(b)
    return len(common) / max(len(set(a)), len(set(b)), 1)


def _similarity_score(target: Dish, candidate: Dish) -> float:
    score = BASE_SIMILARITY
    score += tag_overlap(target.dietary_tags, candidate.dietary_tags) * TAG_OVERLAP_WEIGHT

    diff = abs(candidate.price - target.price)
    if diff < CLOSE_PRICE_DIFF:
        score += CLOSE_PRICE_SIMILARITY
    elif diff < NEAR_PRICE_DIFF:
        score += NEAR_PRICE_SIMILARITY
    return score


def similar_dishes(
    target_id: str,
    catalogue: list[Dish],
    limit: int = DEFAULT_SIMILAR_LIMIT,
    same_category: bool = True,
) -> list[SimilarDish]:
    """Return up to *limit* in-stock dishes most similar to *target_id*.

    With *same_category* the pool is restricted to the target's category
    before scoring, and category membership alone is enough to qualify.
    An unknown target yields an empty list.
    """
    if limit < 1:
        return []

    target = next((d for d in catalogue if d.id == target_id), None)
    if target is None:
        return []

    pool = [d for d in catalogue if d.id != target.id and d.in_stock]
    if same_category:
        pool = [d for d in pool if d.category == target.category]

    scored = [(_similarity_score(target, d), d) for d in pool]
    scored.sort(key=lambda entry: entry[0], reverse=True)

    return [
        SimilarDish(**d.model_dump(), similarity_score=round(score, 4))
        for score, d in scored[:limit]
    ]


# ── Pairwise affinity (order-history picks) ──────────────────────────────


def dish_affinity(a: Dish, b: Dish) -> float:
    """Affinity between two dishes in [0, 1]: category, tags and price."""
    score = 0.0
    if a.category and a.category == b.category:
        score += 0.5

    score += tag_overlap(a.dietary_tags, b.dietary_tags) * 0.3

    diff = abs(a.price - b.price)
    if diff < CLOSE_PRICE_DIFF:
        score += 0.2
    elif diff < NEAR_PRICE_DIFF:
        score += 0.1
    return score
