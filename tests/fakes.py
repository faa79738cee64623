from __future__ import annotations

import json
from typing import Any, Callable, Sequence

from atsmatch.ai.service import ReasoningService
from atsmatch.ai.types import ChatMessage

Reply = str | dict | BaseException


class FakeAIClient:
    """In-process stand-in for the OpenAI provider.

    ``replies`` is either a list consumed in call order or a callable receiving
    the system prompt and model name. Dict replies are encoded as JSON and
    exception replies are raised.
    """

    def __init__(self, replies: Sequence[Reply] | Callable[[str, str], Reply]):
        self._replies = replies if callable(replies) else list(replies)
        self.models: list[str] = []
        self.system_prompts: list[str] = []

    async def complete_json(
        self,
        messages: Sequence[ChatMessage],
        *,
        model: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        system_prompt = messages[0].content
        self.models.append(model)
        self.system_prompts.append(system_prompt)
        if callable(self._replies):
            reply: Any = self._replies(system_prompt, model)
        else:
            if not self._replies:
                raise AssertionError("FakeAIClient ran out of replies")
            reply = self._replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply


def make_service(client: FakeAIClient | None = None, **overrides: Any) -> ReasoningService:
    options: dict[str, Any] = {
        "model": "primary-model",
        "substitute_model": "cheap-model",
        "timeout_s": 5.0,
        "max_attempts": 3,
        "base_delay_s": 0.0,
        "multiplier": 3.0,
    }
    options.update(overrides)
    return ReasoningService(client, **options)
