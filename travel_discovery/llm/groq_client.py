from __future__ import annotations

import asyncio
import logging

from groq import AsyncGroq

from ..suggestions.models import ContentKind, UserContext
from .config import DEFAULT_LLM_CONFIG, LLMConfig
from .prompts import build_messages

logger = logging.getLogger(__name__)


class GenerationFailure(Exception):
    """The oracle could not produce text: network, timeout, API error or empty reply."""


class GenerationClient:
    """Async wrapper around the Groq chat completions API.

    Returns raw model text; parsing is left to the extraction layer.
    No retries are attempted.
    """

    def __init__(self, config: LLMConfig = DEFAULT_LLM_CONFIG, client: AsyncGroq | None = None):
        self.config = config
        self._client = client

    def _get_client(self) -> AsyncGroq:
        if self._client is None:
            self._client = AsyncGroq(api_key=self.config.api_key, timeout=self.config.timeout)
        return self._client

    async def generate(self, context: UserContext, kind: ContentKind, count: int = 4) -> str:
        if not self.config.enabled or not self.config.api_key:
            raise GenerationFailure("LLM disabled or API key missing")

        try:
            response = await asyncio.wait_for(
                self._get_client().chat.completions.create(
                    model=self.config.model,
                    messages=build_messages(context, kind, count),
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                ),
                timeout=self.config.timeout,
            )
            content = response.choices[0].message.content or ""
        except asyncio.TimeoutError as exc:
            raise GenerationFailure(f"{kind.value} generation timed out after {self.config.timeout}s") from exc
        except Exception as exc:
            raise GenerationFailure(f"{kind.value} generation failed: {exc}") from exc

        if not content.strip():
            raise GenerationFailure(f"{kind.value} generation returned empty content")

        logger.debug("Oracle returned %d chars for %s (%s)", len(content), kind.value, context.city)
        return content
