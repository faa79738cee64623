from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

from atsmatch.ai.service import ReasoningService, get_reasoning_service
from atsmatch.core.errors import MalformedResponse
from atsmatch.core.scoring_config import get_scoring_value
from atsmatch.schemas.keywords import Keyword
from atsmatch.taxonomy import get_keyword_patterns

logger = logging.getLogger(__name__)

_FILLER_PREFIX_RE = re.compile(
    r"^(?:(?:experience|proficiency|familiarity|expertise)\s+(?:with|in)|knowledge\s+of|understanding\s+of)\s+",
    re.IGNORECASE,
)
_FILLER_SUFFIX_RE = re.compile(r"\s+(?:experience|proficiency|knowledge)$", re.IGNORECASE)
_CAPITALIZED_RE = re.compile(r"(?<![\w.+#])[A-Z][A-Za-z0-9]*(?:[.+#][A-Za-z0-9+#]+)*\+*#?(?![\w])")

_COMMON_WORDS = frozenset(
    {
        "a", "about", "ability", "an", "and", "are", "as", "at", "be", "bonus", "can", "candidate",
        "candidates", "company", "degree", "description", "do", "excellent", "experience", "for",
        "from", "good", "great", "have", "help", "ideal", "in", "including", "is", "it", "job",
        "join", "knowledge", "looking", "must", "nice", "of", "on", "or", "our", "plus", "preferred",
        "qualifications", "required", "requirements", "responsibilities", "role", "senior", "should",
        "skills", "strong", "team", "the", "this", "to", "us", "we", "what", "who", "will", "with",
        "work", "years", "you", "your",
    }
)


class _ServiceKeyword(BaseModel):
    keyword: str
    importance: str = "required"
    context: str = ""


class _ServiceKeywordPayload(BaseModel):
    keywords: list[_ServiceKeyword] = Field(default_factory=list)


_SYSTEM_PROMPT = (
    "You are an ATS keyword analyst. Extract the most important hiring keywords from the job description: "
    "hard skills, tools, certifications, qualifications and domain terms. "
    'Return JSON only: {"keywords": [{"keyword": str, "importance": "required"|"preferred", "context": str}]}. '
    "Use short lower-case keywords (1-3 words), at most {limit} items, most important first. "
    "context is the job description phrase the keyword came from."
)


def _max_keywords() -> int:
    return int(get_scoring_value("keywords.max_keywords", 15))


def clean_keyword(raw: str) -> str:
    text = " ".join((raw or "").lower().split()).strip(" .,;:")
    text = _FILLER_PREFIX_RE.sub("", text)
    text = _FILLER_SUFFIX_RE.sub("", text)
    return text.strip(" .,;:")


def _importance(value: str) -> Literal["required", "preferred"]:
    return "preferred" if (value or "").strip().lower() == "preferred" else "required"


async def _extract_with_service(job_description: str, service: ReasoningService, limit: int) -> list[Keyword]:
    payload = await service.request_json(
        system_prompt=_SYSTEM_PROMPT.replace("{limit}", str(limit)),
        user_prompt=f"Job description:\n{job_description}",
        schema=_ServiceKeywordPayload,
        purpose="keyword_extraction",
    )
    keywords: list[Keyword] = []
    seen: set[str] = set()
    for item in payload.keywords:
        text = clean_keyword(item.keyword)
        if not text or text in seen:
            continue
        seen.add(text)
        keywords.append(
            Keyword(
                text=text,
                importance=_importance(item.importance),
                context=item.context.strip(),
                source="service",
            )
        )
        if len(keywords) >= limit:
            break
    if not keywords:
        raise MalformedResponse("Reasoning service returned no keywords", code="empty_keywords")
    return keywords


@dataclass
class _Hit:
    count: int
    first_pos: int


def _record(hits: dict[str, _Hit], term: str, position: int) -> None:
    hit = hits.get(term)
    if hit is None:
        hits[term] = _Hit(count=1, first_pos=position)
    else:
        hit.count += 1
        hit.first_pos = min(hit.first_pos, position)


def extract_keywords_fallback(job_description: str, *, limit: int | None = None) -> list[Keyword]:
    """Pattern-library and capitalized-token extraction, ranked by frequency."""
    limit = _max_keywords() if limit is None else limit
    text = job_description or ""
    hits: dict[str, _Hit] = {}
    covered: list[tuple[int, int]] = []

    for pattern in get_keyword_patterns():
        for match in pattern.regex.finditer(text):
            _record(hits, pattern.term_for(match), match.start())
            covered.append(match.span())

    for match in _CAPITALIZED_RE.finditer(text):
        token = match.group(0)
        lowered = token.lower()
        if len(token) < 2 or lowered in _COMMON_WORDS:
            continue
        start, end = match.span()
        if any(start < span_end and span_start < end for span_start, span_end in covered):
            continue
        if any(lowered in term.split() for term in hits):
            continue
        _record(hits, lowered, start)

    ranked = sorted(hits.items(), key=lambda item: (-item[1].count, item[1].first_pos))
    context = str(get_scoring_value("keywords.fallback_context", "Detected in job description text"))
    return [
        Keyword(text=term, importance="required", context=context, source="fallback")
        for term, _ in ranked[:limit]
    ]


async def extract_keywords(job_description: str, *, service: ReasoningService | None = None) -> list[Keyword]:
    """Extract up to ``keywords.max_keywords`` keywords; never raises."""
    limit = _max_keywords()
    service = service or get_reasoning_service()
    if service.enabled:
        try:
            keywords = await _extract_with_service(job_description, service, limit)
            logger.info("keyword_extraction source=service count=%s", len(keywords))
            return keywords
        except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
            logger.warning("keyword_extraction_fallback reason=%s", getattr(exc, "code", type(exc).__name__))
    else:
        logger.info("keyword_extraction_fallback reason=llm_disabled")

    keywords = extract_keywords_fallback(job_description, limit=limit)
    logger.info("keyword_extraction source=fallback count=%s", len(keywords))
    return keywords
