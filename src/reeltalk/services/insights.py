"""Text-generation provider for title insights.

The provider is asked for exactly four insights as a JSON object. Parsing is
lenient: anything that cannot be read as a list of insights degrades to an
empty list instead of failing the request.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol, runtime_checkable

from openai import AsyncOpenAI, OpenAIError

from reeltalk.core.errors import UpstreamError
from reeltalk.core.settings import settings
from reeltalk.schemas.insight import INSIGHT_TYPES, Insight

logger = logging.getLogger(__name__)

INSIGHT_PROMPT_TEMPLATE = """You are a film critic and cultural analyst. Analyze "{title}" and provide deep insights.

Return a JSON object with an "insights" array containing 4 insights with this exact structure:
{{
  "insights": [
    {{
      "type": "dialogue",
      "title": "A memorable quote from the movie",
      "description": "2-3 sentences explaining its deeper meaning or significance"
    }},
    {{
      "type": "metaphor",
      "title": "A visual or thematic metaphor",
      "description": "2-3 sentences explaining the symbolic meaning"
    }},
    {{
      "type": "easter-egg",
      "title": "A hidden detail or Easter egg",
      "description": "2-3 sentences explaining this hidden element"
    }},
    {{
      "type": "metaphor",
      "title": "Another symbolic element",
      "description": "2-3 sentences about its cultural or philosophical significance"
    }}
  ]
}}

{synopsis_line}

Return ONLY valid JSON."""


def build_insight_prompt(title: str, synopsis: str | None) -> str:
    synopsis_line = f"Synopsis: {synopsis}" if synopsis else ""
    return INSIGHT_PROMPT_TEMPLATE.format(title=title, synopsis_line=synopsis_line)


def parse_insights(content: str | None) -> list[Insight]:
    """Turn a provider response into insights with per-response ids.

    Accepts either `{"insights": [...]}` or a bare array. Unknown insight
    types become "metaphor"; items that are not objects are skipped.
    """
    if not content:
        return []
    try:
        parsed: Any = json.loads(content)
    except ValueError:
        logger.warning("Insight provider returned non-JSON content")
        return []

    items = parsed.get("insights", []) if isinstance(parsed, dict) else parsed
    if not isinstance(items, list):
        return []

    insights: list[Insight] = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        kind = item.get("type")
        insights.append(
            Insight(
                id=f"ai-{idx}",
                type=kind if kind in INSIGHT_TYPES else "metaphor",
                title=str(item.get("title") or "Insight"),
                description=str(item.get("description") or ""),
            )
        )
    return insights


@runtime_checkable
class InsightProvider(Protocol):
    """Single-turn completion returning the raw response text."""

    async def complete(self, prompt: str) -> str | None:
        ...


class OpenAIInsightProvider:
    """Chat-completion provider speaking the OpenAI API."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key or settings.openai_api_key
        self.base_url = base_url or settings.openai_base_url
        self.model = model or settings.insight_model
        self.max_tokens = max_tokens or settings.insight_max_tokens
        self.timeout = timeout if timeout is not None else settings.provider_timeout_seconds
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise UpstreamError("OPENAI_API_KEY is not configured")
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def complete(self, prompt: str) -> str | None:
        client = self._get_client()
        try:
            completion = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                max_tokens=self.max_tokens,
            )
        except OpenAIError as exc:
            logger.warning("Insight generation failed: %s", exc)
            raise UpstreamError("Insight generation failed") from exc
        if not completion.choices:
            return None
        return completion.choices[0].message.content


_provider: InsightProvider | None = None


def get_insight_provider(*, force_refresh: bool = False) -> InsightProvider:
    """Return the active insight provider. Lazy-initialized."""
    global _provider
    if force_refresh:
        _provider = None
    if _provider is None:
        _provider = OpenAIInsightProvider()
    return _provider
