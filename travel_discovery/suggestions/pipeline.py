"""
Generation pipeline facade.

    context -> oracle -> extraction/validation -> (payload | fallback)

``DiscoveryPipeline`` never raises to its caller: every oracle or parsing
problem is logged and replaced by the deterministic fallback payload.
``DiscoverySession`` keeps one result slot per content kind and drops
responses that were overtaken by a newer request for the same slot.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
import time
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from ..analytics.store import record_event
from ..llm.groq_client import GenerationFailure
from .cache import ResponseCache, make_key
from .config import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from .context import time_of_day_for_hour
from .extraction import extract
from .fallback import fallback
from .models import ContentKind, GeoPoint, LocalDiscovery, Suggestion, UserContext

if TYPE_CHECKING:
    from ..social.enrichment import SocialEnricher

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, context: UserContext, kind: ContentKind, count: int = 4) -> str: ...


class DiscoveryPipeline:
    def __init__(
        self,
        client: TextGenerator,
        config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
        cache: ResponseCache | None = None,
    ):
        self.client = client
        self.config = config
        self.cache = cache if cache is not None else ResponseCache(ttl=config.cache_ttl_seconds)

    async def generate(self, context: UserContext, kind: ContentKind) -> list[Suggestion] | LocalDiscovery:
        """Return oracle content for ``kind``, or the fallback payload on any failure."""
        start_time = time.time()
        key = make_key(kind, context)

        if self.config.cache_enabled:
            cached = self.cache.get(key)
            if cached is not None:
                self._record(kind, context, "cache", start_time)
                return list(cached) if isinstance(cached, list) else cached

        try:
            raw_text = await self.client.generate(context, kind, self.config.suggestion_count)
            result = extract(raw_text, kind)
        except GenerationFailure:
            logger.warning("Oracle call failed for %s in %s, using fallback", kind.value, context.city, exc_info=True)
            reason = "generation"
        except Exception:
            logger.warning("Unexpected error generating %s, using fallback", kind.value, exc_info=True)
            reason = "unexpected"
        else:
            if result.ok:
                if self.config.cache_enabled:
                    payload = result.payload
                    self.cache.set(key, list(payload) if isinstance(payload, list) else payload)
                self._record(kind, context, "oracle", start_time, dropped=result.dropped)
                return result.payload
            logger.warning(
                "Oracle output for %s rejected (%s): %s; using fallback",
                kind.value, result.error.kind, result.error.message,
            )
            reason = result.error.kind

        self._record(kind, context, "fallback", start_time, failure=reason)
        return fallback(kind, context)

    async def generate_suggestions(self, context: UserContext) -> list[Suggestion]:
        return await self.generate(context, ContentKind.suggestions)

    async def generate_local_discovery(self, city: str, context: UserContext | None = None) -> LocalDiscovery:
        if context is None or context.city != city:
            context = UserContext(
                location=GeoPoint(lat=0.0, lng=0.0),
                city=city,
                time_of_day=time_of_day_for_hour(datetime.now().hour),
            )
        return await self.generate(context, ContentKind.local_discovery)

    @staticmethod
    def _record(
        kind: ContentKind,
        context: UserContext,
        source: str,
        start_time: float,
        failure: str | None = None,
        dropped: int = 0,
    ) -> None:
        record_event("generation", {
            "kind": kind.value,
            "city": context.city,
            "source": source,
            "failure": failure,
            "dropped": dropped,
            "response_time_ms": round((time.time() - start_time) * 1000, 1),
        })


class RequestTracker:
    """Issues increasing tickets per content kind; only the latest ticket is current."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest: dict[ContentKind, int] = {}

    def issue(self, kind: ContentKind) -> int:
        ticket = next(self._counter)
        self._latest[kind] = ticket
        return ticket

    def is_current(self, kind: ContentKind, ticket: int) -> bool:
        return self._latest.get(kind) == ticket


class DiscoverySession:
    """Holds the latest suggestions and local discovery for one consumer."""

    def __init__(self, pipeline: DiscoveryPipeline, enricher: SocialEnricher | None = None):
        self.pipeline = pipeline
        self.enricher = enricher
        self.tracker = RequestTracker()
        self.context: UserContext | None = None
        self.suggestions: list[Suggestion] = []
        self.local_discovery: LocalDiscovery | None = None

    async def refresh(self, context: UserContext) -> None:
        """Regenerate both slots concurrently for a new context."""
        self.context = context
        await asyncio.gather(
            self.load_suggestions(context),
            self.load_local_discovery(context),
        )

    async def load_suggestions(self, context: UserContext) -> bool:
        ticket = self.tracker.issue(ContentKind.suggestions)
        suggestions = await self.pipeline.generate_suggestions(context)
        if self.enricher is not None:
            suggestions = self.enricher.enhance(suggestions)
        if not self.tracker.is_current(ContentKind.suggestions, ticket):
            logger.debug("Discarding stale suggestions for %s", context.city)
            return False
        self.suggestions = suggestions
        return True

    async def load_local_discovery(self, context: UserContext) -> bool:
        ticket = self.tracker.issue(ContentKind.local_discovery)
        discovery = await self.pipeline.generate_local_discovery(context.city, context)
        if not self.tracker.is_current(ContentKind.local_discovery, ticket):
            logger.debug("Discarding stale local discovery for %s", context.city)
            return False
        self.local_discovery = discovery
        return True
