from __future__ import annotations

import os
from typing import Optional, Sequence

import openai
from openai import AsyncOpenAI

from atsmatch.ai.types import ChatMessage
from atsmatch.core.errors import (
    MalformedResponse,
    QuotaExceeded,
    ReasoningServiceError,
    ServiceUnavailable,
)


def classify_openai_error(exc: Exception) -> ReasoningServiceError:
    """Map an OpenAI SDK exception onto the engine's error taxonomy."""
    if isinstance(exc, openai.RateLimitError):
        return QuotaExceeded(f"OpenAI rate limit or quota exceeded: {exc}")
    if isinstance(exc, openai.APITimeoutError):
        return ServiceUnavailable(f"OpenAI request timed out: {exc}", code="llm_timeout")
    if isinstance(exc, openai.APIConnectionError):
        return ServiceUnavailable(f"OpenAI connection failed: {exc}")
    if isinstance(exc, openai.APIStatusError):
        if exc.status_code == 429:
            return QuotaExceeded(f"OpenAI rate limit or quota exceeded: {exc}")
        return ServiceUnavailable(f"OpenAI returned HTTP {exc.status_code}: {exc}")
    return ServiceUnavailable(f"OpenAI call failed: {exc}")


class OpenAIProvider:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        max_retries: int = 0,
    ):
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        # SDK retries off; ReasoningService owns backoff.
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            max_retries=max_retries,
        )

    async def complete_json(
        self,
        messages: Sequence[ChatMessage],
        *,
        model: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]
        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=payload,
                temperature=temperature,
                response_format={"type": "json_object"},
                max_tokens=max_output_tokens,
            )
        except openai.OpenAIError as exc:
            raise classify_openai_error(exc) from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content:
            raise MalformedResponse("OpenAI returned an empty response", code="empty_response")
        return content
