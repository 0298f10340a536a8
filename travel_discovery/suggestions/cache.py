from __future__ import annotations

import hashlib
import json
import time
from typing import Any

from .models import ContentKind, UserContext

_DEFAULT_TTL = 300.0


def make_key(kind: ContentKind, context: UserContext) -> str:
    if kind is ContentKind.local_discovery:
        request_dict: dict[str, Any] = {"kind": kind.value, "city": context.city.lower()}
    else:
        # Coordinates are left out so small GPS jitter still hits the cache.
        request_dict = {
            "kind": kind.value,
            "city": context.city.lower(),
            "interests": sorted(i.lower() for i in context.interests),
            "favorites": sorted(f.name.lower() for f in context.favorites),
            "time_of_day": context.time_of_day,
            "weather": context.weather.lower(),
        }
    normalized = json.dumps(request_dict, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


class ResponseCache:
    """In-process TTL cache for validated oracle payloads."""

    def __init__(self, ttl: float = _DEFAULT_TTL):
        self.ttl = ttl
        self._entries: dict[str, dict[str, Any]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry and time.time() - entry["created_at"] < self.ttl:
            self._hits += 1
            return entry["value"]
        if entry:
            del self._entries[key]
        self._misses += 1
        return None

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = {"value": value, "created_at": time.time()}

    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

