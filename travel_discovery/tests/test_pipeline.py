import asyncio
import json

from travel_discovery.analytics.store import clear_events, get_events
from travel_discovery.llm.config import LLMConfig
from travel_discovery.llm.groq_client import GenerationClient, GenerationFailure
from travel_discovery.social.enrichment import SocialEnricher
from travel_discovery.social.source import StaticSocialSignalSource
from travel_discovery.suggestions.cache import ResponseCache
from travel_discovery.suggestions.config import PipelineConfig
from travel_discovery.suggestions.context import build_user_context
from travel_discovery.suggestions.models import ContentKind, LocalDiscovery
from travel_discovery.suggestions.pipeline import DiscoveryPipeline, DiscoverySession, RequestTracker
from travel_discovery.tests.fakes import SAMPLE_SUGGESTIONS, FakeClient, wrap_in_prose

PARIS = build_user_context(
    location={"lat": 48.8566, "lng": 2.3522},
    city="Paris",
    interests=["food"],
    time_of_day="morning",
    weather="rainy",
)


def _pipeline(client, **config) -> DiscoveryPipeline:
    return DiscoveryPipeline(client, config=PipelineConfig(**config), cache=ResponseCache())


def _context(city):
    return build_user_context(location={"lat": 0, "lng": 0}, city=city, time_of_day="afternoon")


def test_generation_failure_returns_fallback():
    clear_events()
    pipeline = _pipeline(FakeClient(error=GenerationFailure("boom")))

    result = asyncio.run(pipeline.generate_suggestions(PARIS))

    assert len(result) == 2
    assert "coffee" in result[0].tags
    assert result[1].name == "Paris Cultural Center"
    event = get_events("generation")[-1]
    assert event["source"] == "fallback"
    assert event["failure"] == "generation"


def test_real_client_without_key_falls_back():
    pipeline = _pipeline(GenerationClient(LLMConfig(api_key="")))

    result = asyncio.run(pipeline.generate_suggestions(PARIS))

    assert [s.id for s in result] == ["fallback_1", "fallback_2"]
    assert all(s.time_of_day == "morning" for s in result)


def test_unexpected_client_error_returns_fallback():
    pipeline = _pipeline(FakeClient(error=RuntimeError("bug")))

    result = asyncio.run(pipeline.generate_suggestions(PARIS))

    assert result[0].id == "fallback_1"


def test_text_without_json_returns_fallback():
    clear_events()
    pipeline = _pipeline(FakeClient(suggestions_text="Sorry, I can't help with that."))

    result = asyncio.run(pipeline.generate_suggestions(PARIS))

    assert result[0].id == "fallback_1"
    assert get_events("generation")[-1]["failure"] == "extraction"


def test_invalid_payload_returns_fallback():
    bad = json.dumps([dict(SAMPLE_SUGGESTIONS[0], priceLevel=9)])
    pipeline = _pipeline(FakeClient(suggestions_text=bad))

    result = asyncio.run(pipeline.generate_suggestions(PARIS))

    assert result[0].id == "fallback_1"


def test_oracle_payload_is_returned_when_valid():
    clear_events()
    pipeline = _pipeline(FakeClient())

    result = asyncio.run(pipeline.generate_suggestions(PARIS))

    assert [s.id for s in result] == ["place_1", "place_2", "place_3"]
    assert get_events("generation")[-1]["source"] == "oracle"


def test_every_returned_suggestion_satisfies_invariants():
    mixed = [SAMPLE_SUGGESTIONS[0], dict(SAMPLE_SUGGESTIONS[1], rating=-1), dict(SAMPLE_SUGGESTIONS[2], id="")]
    for client in (FakeClient(suggestions_text=json.dumps(mixed)), FakeClient(error=GenerationFailure("x"))):
        for s in asyncio.run(_pipeline(client).generate_suggestions(PARIS)):
            assert 0 <= s.rating <= 5
            assert s.price_level in (1, 2, 3)
            assert s.id and s.name


def test_local_discovery_success_and_fallback():
    ok = asyncio.run(_pipeline(FakeClient()).generate_local_discovery("Paris"))
    failed = asyncio.run(_pipeline(FakeClient(discovery_text="no json")).generate_local_discovery("Paris"))

    assert isinstance(ok, LocalDiscovery)
    assert ok.hidden_gem.name == "Passage des Panoramas"
    assert "Paris" in failed.hidden_gem.name


# ── Cache ────────────────────────────────────────────────────────────────


def test_successful_payload_is_cached():
    client = FakeClient()
    pipeline = _pipeline(client)

    first = asyncio.run(pipeline.generate_suggestions(PARIS))
    second = asyncio.run(pipeline.generate_suggestions(PARIS))

    assert first == second
    assert len(client.calls) == 1
    assert pipeline.cache.stats()["hits"] == 1


def test_fallback_is_not_cached():
    client = FakeClient(error=GenerationFailure("down"))
    pipeline = _pipeline(client)

    asyncio.run(pipeline.generate_suggestions(PARIS))
    client.error = None
    recovered = asyncio.run(pipeline.generate_suggestions(PARIS))

    assert recovered[0].id == "place_1"
    assert len(client.calls) == 2


def test_cache_can_be_disabled():
    client = FakeClient()
    pipeline = _pipeline(client, cache_enabled=False)

    asyncio.run(pipeline.generate_suggestions(PARIS))
    asyncio.run(pipeline.generate_suggestions(PARIS))

    assert len(client.calls) == 2


def test_cache_ttl_comes_from_config():
    client = FakeClient()
    pipeline = DiscoveryPipeline(client, config=PipelineConfig(cache_ttl_seconds=0))

    asyncio.run(pipeline.generate_suggestions(PARIS))
    asyncio.run(pipeline.generate_suggestions(PARIS))

    assert pipeline.cache.ttl == 0
    assert len(client.calls) == 2
    assert DiscoveryPipeline(client).cache.ttl == 300.0


# ── Session slots and stale responses ────────────────────────────────────


def test_request_tracker_only_latest_is_current():
    tracker = RequestTracker()
    first = tracker.issue(ContentKind.suggestions)
    other_kind = tracker.issue(ContentKind.local_discovery)
    second = tracker.issue(ContentKind.suggestions)

    assert not tracker.is_current(ContentKind.suggestions, first)
    assert tracker.is_current(ContentKind.suggestions, second)
    assert tracker.is_current(ContentKind.local_discovery, other_kind)


def test_refresh_fills_slots_by_kind():
    client = FakeClient(delays={"Paris": 0.01})
    enricher = SocialEnricher(StaticSocialSignalSource())
    session = DiscoverySession(_pipeline(client), enricher)

    asyncio.run(session.refresh(PARIS))

    assert [s.id for s in session.suggestions] == ["place_1", "place_2", "place_3"]
    assert session.suggestions[0].social_data.friend_activity == "Sarah visited this place"
    assert session.local_discovery.insider_tip.startswith("Museums")
    assert {kind for _, kind in client.calls} == {ContentKind.suggestions, ContentKind.local_discovery}


def test_stale_response_is_discarded():
    client = FakeClient(delays={"Rome": 0.05})
    session = DiscoverySession(_pipeline(client))

    async def _run():
        # Rome is requested first but answers last.
        return await asyncio.gather(
            session.load_suggestions(_context("Rome")),
            session.load_suggestions(_context("Oslo")),
        )

    stored_rome, stored_oslo = asyncio.run(_run())

    assert stored_rome is False
    assert stored_oslo is True
    assert len(session.suggestions) == 3


def test_stale_fallback_does_not_overwrite_fresh_content():
    class _SlowFailingForRome(FakeClient):
        async def generate(self, context, kind, count=4):
            if context.city == "Rome":
                await asyncio.sleep(0.05)
                raise GenerationFailure("late failure")
            return await super().generate(context, kind, count)

    session = DiscoverySession(_pipeline(_SlowFailingForRome()))

    async def _run():
        await asyncio.gather(
            session.load_suggestions(_context("Rome")),
            session.load_suggestions(_context("Oslo")),
        )

    asyncio.run(_run())

    assert session.suggestions[0].id == "place_1"
