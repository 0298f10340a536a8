import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from travel_discovery.llm.config import LLMConfig
from travel_discovery.llm.groq_client import GenerationClient, GenerationFailure
from travel_discovery.llm.prompts import build_messages
from travel_discovery.suggestions.context import build_user_context
from travel_discovery.suggestions.models import ContentKind

CONTEXT = build_user_context(
    location={"lat": 48.8566, "lng": 2.3522},
    city="Paris",
    interests=["food", "art"],
    favorites=[{"name": "Louvre"}],
    time_of_day="morning",
    weather="rainy",
)

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True, timeout=0.5)
DISABLED_CONFIG = LLMConfig(api_key="test-key", enabled=False)


def _mock_groq_response(content: str | None) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _client_returning(content: str | None) -> MagicMock:
    groq = MagicMock()
    groq.chat.completions.create = AsyncMock(return_value=_mock_groq_response(content))
    return groq


# ── Prompts ──────────────────────────────────────────────────────────────


def test_suggestion_prompt_embeds_context_and_example():
    messages = build_messages(CONTEXT, ContentKind.suggestions, count=4)
    user = messages[-1]["content"]

    assert messages[0]["role"] == "system"
    assert "Generate 4 personalized place suggestions for Paris" in user
    assert "food, art" in user
    assert "Louvre" in user
    assert "rainy" in user
    assert '"priceLevel": 2' in user
    assert '"timeOfDay": "morning"' in user


def test_local_discovery_prompt_embeds_example():
    messages = build_messages(CONTEXT, ContentKind.local_discovery)
    user = messages[-1]["content"]

    assert "Paris" in user
    assert '"hiddenGem"' in user
    assert '"insiderTip"' in user


# ── Client ───────────────────────────────────────────────────────────────


def test_generate_returns_raw_text():
    groq = _client_returning("[{...}] raw text")
    client = GenerationClient(ENABLED_CONFIG, client=groq)

    text = asyncio.run(client.generate(CONTEXT, ContentKind.suggestions))

    assert text == "[{...}] raw text"
    kwargs = groq.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == ENABLED_CONFIG.model
    assert kwargs["messages"][-1]["role"] == "user"


@patch("travel_discovery.llm.groq_client.AsyncGroq")
def test_generate_builds_groq_client_lazily(mock_groq_cls):
    mock_groq_cls.return_value = _client_returning("ok")
    client = GenerationClient(ENABLED_CONFIG)

    asyncio.run(client.generate(CONTEXT, ContentKind.local_discovery))

    mock_groq_cls.assert_called_once_with(api_key="test-key", timeout=0.5)


def test_generate_wraps_api_error():
    groq = MagicMock()
    groq.chat.completions.create = AsyncMock(side_effect=Exception("API down"))
    client = GenerationClient(ENABLED_CONFIG, client=groq)

    with pytest.raises(GenerationFailure):
        asyncio.run(client.generate(CONTEXT, ContentKind.suggestions))


def test_generate_times_out():
    async def _slow(**kwargs):
        await asyncio.sleep(5)

    groq = MagicMock()
    groq.chat.completions.create = _slow
    client = GenerationClient(LLMConfig(api_key="test-key", timeout=0.01), client=groq)

    with pytest.raises(GenerationFailure, match="timed out"):
        asyncio.run(client.generate(CONTEXT, ContentKind.suggestions))


def test_generate_rejects_empty_content():
    client = GenerationClient(ENABLED_CONFIG, client=_client_returning(None))

    with pytest.raises(GenerationFailure, match="empty"):
        asyncio.run(client.generate(CONTEXT, ContentKind.suggestions))


def test_generate_disabled():
    groq = _client_returning("unused")
    client = GenerationClient(DISABLED_CONFIG, client=groq)

    with pytest.raises(GenerationFailure):
        asyncio.run(client.generate(CONTEXT, ContentKind.suggestions))
    groq.chat.completions.create.assert_not_called()


def test_generate_without_api_key():
    client = GenerationClient(LLMConfig(api_key=""), client=_client_returning("unused"))

    with pytest.raises(GenerationFailure):
        asyncio.run(client.generate(CONTEXT, ContentKind.suggestions))
