from __future__ import annotations

import logging

from atsmatch.ai.service import ReasoningService, get_reasoning_service
from atsmatch.core.concurrency import run_settled_batches
from atsmatch.core.config import settings
from atsmatch.features.category_scores import half_up
from atsmatch.features.keyword_extractor import extract_keywords
from atsmatch.schemas.keywords import Keyword, KeywordAnalysis, MatchResult
from atsmatch.semantic.match_resolver import build_tiers, resolve_match
from atsmatch.services.inputs import validate_texts
from atsmatch.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

logger = logging.getLogger(__name__)


def keyword_analysis_score(results: list[MatchResult]) -> int:
    if not results:
        return 0
    found = sum(1 for result in results if result.found)
    return half_up(100 * found / len(results))


async def analyze_keywords(
    job_description: str,
    resume_content: str,
    *,
    service: ReasoningService | None = None,
    taxonomy: TaxonomyProvider | None = None,
    semantic_enabled: bool | None = None,
    batch_size: int | None = None,
) -> KeywordAnalysis:
    job, resume = validate_texts(job_description, resume_content)
    service = service or get_reasoning_service()
    taxonomy = taxonomy or get_default_taxonomy_provider()
    enabled = settings.semantic_match_enabled if semantic_enabled is None else semantic_enabled

    keywords = await extract_keywords(job, service=service)
    tiers = build_tiers(taxonomy, service=service, semantic_enabled=enabled)

    async def resolve(keyword: Keyword) -> MatchResult:
        return await resolve_match(keyword, resume, tiers)

    settled = await run_settled_batches(
        keywords,
        resolve,
        batch_size=batch_size or settings.match_batch_size,
    )

    results: list[MatchResult] = []
    for keyword, outcome in zip(keywords, settled):
        if isinstance(outcome, BaseException):
            logger.warning("keyword_match_failed keyword=%s error=%s", keyword.text, outcome)
            results.append(MatchResult.not_found(keyword, "Match could not be resolved."))
        else:
            results.append(outcome)

    analysis = KeywordAnalysis(keywords=results, score=keyword_analysis_score(results))
    logger.info(
        "keyword_analysis keywords=%s matched=%s score=%s",
        len(results),
        analysis.matched_count,
        analysis.score,
    )
    return analysis
