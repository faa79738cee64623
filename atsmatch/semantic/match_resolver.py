from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from pydantic import BaseModel

from atsmatch.ai.service import ReasoningService
from atsmatch.core.errors import ATSMatchError
from atsmatch.core.scoring_config import get_scoring_value
from atsmatch.schemas.keywords import Keyword, MatchResult, MatchType
from atsmatch.taxonomy import TaxonomyProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierOutcome:
    match_type: MatchType
    confidence: float
    explanation: str


class _SemanticVerdict(BaseModel):
    matched: bool = False
    confidence: float = 0.0
    explanation: str = ""


Tier = Callable[[Keyword, str], Awaitable[TierOutcome | None]]

_SEMANTIC_PROMPT = (
    "You judge whether a resume demonstrates a job requirement, allowing for paraphrase and related terms. "
    'Return JSON only: {"matched": bool, "confidence": number between 0 and 1, "explanation": str}.'
)


def _contains_variant(resume_lower: str, variant: str) -> bool:
    short_max = int(get_scoring_value("matching.short_variant_max_len", 3))
    # Short and multi-word variants must stand alone ("ts" in "charts", "graduate degree" in "undergraduate degree").
    if len(variant) <= short_max or any(char.isspace() for char in variant):
        return re.search(rf"(?<!\w){re.escape(variant)}(?!\w)", resume_lower) is not None
    return variant in resume_lower


def direct_tier(keyword: Keyword, resume_text: str) -> TierOutcome | None:
    literal = keyword.text.strip().lower()
    if literal and literal in resume_text.lower():
        return TierOutcome(
            match_type="direct",
            confidence=float(get_scoring_value("matching.confidence.direct", 1.0)),
            explanation=f"Found '{keyword.text}' in the resume.",
        )
    return None


def synonym_tier(keyword: Keyword, resume_text: str, taxonomy: TaxonomyProvider) -> TierOutcome | None:
    literal = keyword.text.strip().lower()
    resume_lower = resume_text.lower()
    for variant in taxonomy.variants(keyword.text):
        if variant == literal:
            continue
        if _contains_variant(resume_lower, variant):
            return TierOutcome(
                match_type="synonym",
                confidence=float(get_scoring_value("matching.confidence.synonym", 0.9)),
                explanation=f"Found synonym '{variant}' for '{keyword.text}'.",
            )
    return None


async def semantic_tier(keyword: Keyword, resume_text: str, service: ReasoningService) -> TierOutcome | None:
    try:
        verdict = await service.request_json(
            system_prompt=_SEMANTIC_PROMPT,
            user_prompt=f"Requirement: {keyword.text}\n\nResume:\n{resume_text}",
            schema=_SemanticVerdict,
            purpose="semantic_match",
        )
    except ATSMatchError as exc:
        logger.warning("semantic_match_degraded keyword=%s reason=%s", keyword.text, exc.code)
        return None
    if not verdict.matched:
        return None
    return TierOutcome(
        match_type="semantic",
        confidence=max(0.0, min(1.0, float(verdict.confidence))),
        explanation=verdict.explanation.strip() or f"Related experience found for '{keyword.text}'.",
    )


def build_tiers(
    taxonomy: TaxonomyProvider,
    *,
    service: ReasoningService | None = None,
    semantic_enabled: bool = False,
) -> list[Tier]:
    async def direct(keyword: Keyword, resume_text: str) -> TierOutcome | None:
        return direct_tier(keyword, resume_text)

    async def synonym(keyword: Keyword, resume_text: str) -> TierOutcome | None:
        return synonym_tier(keyword, resume_text, taxonomy)

    tiers: list[Tier] = [direct, synonym]
    if semantic_enabled and service is not None and service.enabled:

        async def semantic(keyword: Keyword, resume_text: str) -> TierOutcome | None:
            return await semantic_tier(keyword, resume_text, service)

        tiers.append(semantic)
    return tiers


async def resolve_match(keyword: Keyword, resume_text: str, tiers: Sequence[Tier]) -> MatchResult:
    """Run match tiers in order and stop at the first one that finds the keyword."""
    for tier in tiers:
        outcome = await tier(keyword, resume_text)
        if outcome is not None:
            return MatchResult.for_keyword(
                keyword,
                found=True,
                match_type=outcome.match_type,
                confidence=outcome.confidence,
                explanation=outcome.explanation,
            )
    return MatchResult.not_found(keyword, f"'{keyword.text}' was not found in the resume.")
