from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    generations = [e for e in events if e["type"] == "generation"]
    interactions = [e for e in events if e["type"] == "interaction"]
    total = len(generations)

    # Average generation latency (cache hits excluded)
    times = [g["response_time_ms"] for g in generations if g.get("source") != "cache"]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Content source split
    source_counter: Counter[str] = Counter(g.get("source", "unknown") for g in generations)
    fallbacks = source_counter.get("fallback", 0)

    # Why fallbacks happened
    failure_counter: Counter[str] = Counter(
        g["failure"] for g in generations if g.get("failure")
    )

    # Top cities
    city_counter: Counter[str] = Counter(g.get("city", "unknown") for g in generations)
    top_cities = [{"name": n, "count": c} for n, c in city_counter.most_common(10)]

    # Interactions
    action_counter: Counter[str] = Counter(i.get("action", "unknown") for i in interactions)
    likes = action_counter.get("like", 0)
    passes = action_counter.get("pass", 0)
    swipes = likes + passes

    place_counter: Counter[str] = Counter(
        i["suggestion_id"] for i in interactions if i.get("action") == "like"
    )
    most_liked = [{"id": n, "count": c} for n, c in place_counter.most_common(10)]

    return {
        "total_generations": total,
        "avg_generation_time_ms": avg_time,
        "generations_by_source": dict(source_counter),
        "fallback_rate": round(fallbacks / total * 100, 1) if total else 0.0,
        "fallback_reasons": dict(failure_counter),
        "top_cities": top_cities,
        "interactions": {
            "total": len(interactions),
            "by_action": dict(action_counter),
            "like_rate": round(likes / swipes * 100, 1) if swipes else 0.0,
            "most_liked": most_liked,
        },
    }
