from __future__ import annotations

import logging
import os
import uuid

from fastapi import Depends, FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.interactions import track_interaction
from .analytics.store import get_events
from .deck.models import DeckSnapshot, FilterRequest
from .deck.store import DeckStore
from .llm.groq_client import GenerationClient
from .social.enrichment import SocialEnricher
from .social.source import StaticSocialSignalSource
from .suggestions.context import build_user_context
from .suggestions.models import (
    InteractionRequest,
    InteractionResponse,
    LocalDiscovery,
    LocalDiscoveryRequest,
    Suggestion,
    SuggestionsRequest,
)
from .suggestions.pipeline import DiscoveryPipeline

logger = logging.getLogger(__name__)

app = FastAPI(title="Travel Discovery API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "travel-discovery-secret-change-in-production"),
)

_pipeline = DiscoveryPipeline(GenerationClient())
_enricher = SocialEnricher(StaticSocialSignalSource())

# Deck state per browser session; the cookie only carries the deck id.
deck_store = DeckStore()


def get_pipeline() -> DiscoveryPipeline:
    return _pipeline


def get_enricher() -> SocialEnricher:
    return _enricher


def _deck_id(request: Request) -> str:
    deck_id = request.session.get("deck_id")
    if not deck_id:
        deck_id = uuid.uuid4().hex
        request.session["deck_id"] = deck_id
    return deck_id


def clear_decks() -> None:
    deck_store.clear()


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Generation endpoints ─────────────────────────────────────────────────


@app.post("/suggestions", response_model=list[Suggestion])
async def suggestions(
    body: SuggestionsRequest,
    request: Request,
    pipeline: DiscoveryPipeline = Depends(get_pipeline),
    enricher: SocialEnricher = Depends(get_enricher),
) -> list[Suggestion]:
    context = build_user_context(
        location=body.location,
        city=body.city,
        interests=body.interests,
        favorites=body.favorites,
        time_of_day=body.time_of_day,
        weather=body.weather,
    )
    deck_id = _deck_id(request)
    ticket = deck_store.issue_ticket(deck_id)

    raw = await pipeline.generate_suggestions(context)
    enhanced = enricher.enhance(raw)

    # A new batch starts a new deck with the caller's current filter, unless
    # a later /suggestions call on the same session was issued meanwhile.
    if not deck_store.replace_items(deck_id, enhanced, ticket):
        logger.info("Suggestions for %s arrived after a newer request, deck left unchanged", context.city)

    return enhanced


@app.post("/local-discovery", response_model=LocalDiscovery)
async def local_discovery(
    body: LocalDiscoveryRequest,
    pipeline: DiscoveryPipeline = Depends(get_pipeline),
) -> LocalDiscovery:
    return await pipeline.generate_local_discovery(body.city)


@app.post("/suggestions/enhance", response_model=list[Suggestion])
def enhance(
    body: list[Suggestion],
    enricher: SocialEnricher = Depends(get_enricher),
) -> list[Suggestion]:
    return enricher.enhance(body)


@app.post("/interactions", response_model=InteractionResponse)
def interactions(body: InteractionRequest) -> InteractionResponse:
    track_interaction(body.suggestion_id, body.action)
    return InteractionResponse(status="recorded")


# ── Deck endpoints ───────────────────────────────────────────────────────


@app.get("/deck", response_model=DeckSnapshot)
def get_deck(request: Request) -> DeckSnapshot:
    with deck_store.open(_deck_id(request)) as deck:
        return deck.snapshot()


@app.post("/deck/like", response_model=DeckSnapshot)
def deck_like(request: Request) -> DeckSnapshot:
    with deck_store.open(_deck_id(request)) as deck:
        deck.like()
        return deck.snapshot()


@app.post("/deck/pass", response_model=DeckSnapshot)
def deck_pass(request: Request) -> DeckSnapshot:
    with deck_store.open(_deck_id(request)) as deck:
        deck.pass_()
        return deck.snapshot()


@app.post("/deck/filter", response_model=DeckSnapshot)
def deck_filter(body: FilterRequest, request: Request) -> DeckSnapshot:
    with deck_store.open(_deck_id(request)) as deck:
        deck.set_filter(body.mode)
        return deck.snapshot()


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(pipeline: DiscoveryPipeline = Depends(get_pipeline)) -> dict:
    return pipeline.cache.stats()
