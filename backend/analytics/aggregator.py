from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    total = len(events)

    # Average response time
    times = [e["response_time_ms"] for e in events if "response_time_ms" in e]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Requests per ranking kind
    kind_counter: Counter[str] = Counter(e.get("kind", "unknown") for e in events)

    # Most recommended dishes
    dish_counter: Counter[str] = Counter()
    for e in events:
        for dish_id in e.get("dish_ids", []) or []:
            dish_counter[dish_id] += 1
    top_dishes = [{"dish_id": d, "count": c} for d, c in dish_counter.most_common(10)]

    # Personalisation on the "for you" feed
    for_you = [e for e in events if e.get("kind") == "for_you"]
    signed_in = [e for e in for_you if e.get("user")]
    personalized = sum(1 for e in signed_in if e.get("personalized"))
    backfilled = [e.get("backfilled", 0) for e in for_you]
    topped_up = sum(1 for n in backfilled if n > 0)

    empty_results = sum(1 for e in events if e.get("results_returned", 0) == 0)

    return {
        "total_requests": total,
        "avg_response_time_ms": avg_time,
        "requests_by_kind": dict(kind_counter),
        "top_recommended_dishes": top_dishes,
        "for_you": {
            "requests": len(for_you),
            "anonymous": len(for_you) - len(signed_in),
            "personalized_rate": round(personalized / len(signed_in) * 100, 1) if signed_in else 0.0,
            "backfill_rate": round(topped_up / len(for_you) * 100, 1) if for_you else 0.0,
            "backfilled_items": sum(backfilled),
        },
        "empty_results": empty_results,
    }
