from __future__ import annotations

import json
import logging
import re
from typing import Any

from atsmatch.core.errors import MalformedResponse

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL | re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def _recover_json_object(text: str) -> dict[str, Any] | None:
    """Best-effort extraction of a JSON object embedded in free text."""
    candidate = text
    fence = _FENCE_RE.search(candidate)
    if fence:
        candidate = fence.group(1).strip()
    match = _OBJECT_RE.search(candidate)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_json_payload(text: str | None) -> dict[str, Any]:
    """Parse a strict-JSON service response, with one recovery attempt.

    Raises ``MalformedResponse`` when neither the strict parse nor the recovery
    parse yields a JSON object.
    """
    if not text or not text.strip():
        raise MalformedResponse("Empty response from reasoning service", code="empty_response")

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        recovered = _recover_json_object(text)
        if recovered is None:
            raise MalformedResponse(f"Malformed JSON response: {exc}") from exc
        logger.info("reasoning_json_recovered chars=%s", len(text))
        return recovered

    if not isinstance(parsed, dict):
        raise MalformedResponse("Expected a JSON object at the top level")
    return parsed
