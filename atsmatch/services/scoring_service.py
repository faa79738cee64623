from __future__ import annotations

import asyncio
import logging
from typing import Callable

from pydantic import BaseModel, Field

from atsmatch.ai.service import ReasoningService, get_reasoning_service
from atsmatch.core.errors import ATSMatchError, InputInvalid, InternalComputeError, QuotaExceeded
from atsmatch.features import category_scores
from atsmatch.features.aggregator import aggregate
from atsmatch.features.structure_validator import validate_structure
from atsmatch.schemas.keywords import KeywordAnalysis
from atsmatch.schemas.scoring import CategoryScore, ScoreReport, ScoringMode, StructureReport
from atsmatch.services.inputs import validate_texts
from atsmatch.services.matching_service import analyze_keywords

logger = logging.getLogger(__name__)

SERVICE_BACKED = ("role_alignment",)
BASIC_CATEGORIES = ("keyword_match", "resume_structure", "format_compatibility")
EMERGENCY_COMPUTED = ("resume_structure", "format_compatibility")


class _ServiceCategoryScore(BaseModel):
    score: float = Field(allow_inf_nan=False)
    rationale: str = ""


_CATEGORY_PROMPTS = {
    "role_alignment": (
        "You are an ATS screener. Rate how well the candidate's titles, seniority and responsibilities align "
        "with the role in the job description, from 0 to {max}. "
        'Return JSON only: {"score": int, "rationale": str}.'
    ),
}


def _deterministic_calculators(
    job: str, resume: str, analysis: KeywordAnalysis | None
) -> dict[str, Callable[[], int]]:
    def keyword_match() -> int:
        if analysis is None:
            raise InternalComputeError("Keyword analysis is unavailable")
        return category_scores.keyword_match(analysis.keywords)

    def skills_match_weighted() -> int:
        if analysis is None:
            raise InternalComputeError("Keyword analysis is unavailable")
        return category_scores.skills_match_weighted(analysis.keywords)

    return {
        "keyword_match": keyword_match,
        "role_alignment": lambda: category_scores.role_alignment(job, resume),
        "skills_match": lambda: category_scores.skills_match(job, resume),
        "skills_match_weighted": skills_match_weighted,
        "achievements": lambda: category_scores.achievements(resume),
        "experience_level": lambda: category_scores.experience_level(job, resume),
        "resume_structure": lambda: category_scores.resume_structure(resume),
        "customization": lambda: category_scores.customization(job, resume),
        "format_compatibility": lambda: category_scores.format_compatibility(resume),
        "grammar": lambda: category_scores.grammar(resume),
        "visual_appeal": lambda: category_scores.visual_appeal(resume),
    }


async def _service_category(service: ReasoningService, key: str, job: str, resume: str) -> int:
    budget = category_scores.category_spec(key).max
    result = await service.request_json(
        system_prompt=_CATEGORY_PROMPTS[key].replace("{max}", str(budget)),
        user_prompt=f"Job description:\n{job}\n\nResume:\n{resume}",
        schema=_ServiceCategoryScore,
        purpose=f"category_{key}",
    )
    return max(0, min(budget, category_scores.half_up(max(0.0, result.score))))


async def _service_backed_scores(service: ReasoningService, job: str, resume: str) -> dict[str, int]:
    settled = await asyncio.gather(
        *(_service_category(service, key, job, resume) for key in SERVICE_BACKED),
        return_exceptions=True,
    )
    failures = [outcome for outcome in settled if isinstance(outcome, BaseException)]
    quota = next((failure for failure in failures if isinstance(failure, QuotaExceeded)), None)
    if quota is not None:
        raise quota
    if failures:
        raise failures[0]
    return dict(zip(SERVICE_BACKED, settled))


def _calculate(calculators: dict[str, Callable[[], int]], key: str) -> int:
    try:
        return calculators[key]()
    except ATSMatchError:
        raise
    except Exception as exc:
        raise InternalComputeError(f"Failed to compute '{key}': {exc}") from exc


def _compute(calculators: dict[str, Callable[[], int]], keys: tuple[str, ...]) -> list[CategoryScore]:
    return [category_scores.make_score(key, _calculate(calculators, key)) for key in keys]


async def _full_categories(
    service: ReasoningService,
    job: str,
    resume: str,
    calculators: dict[str, Callable[[], int]],
) -> tuple[list[CategoryScore], ScoringMode]:
    keys = tuple(spec.key for spec in category_scores.get_category_specs())
    mode: ScoringMode = "deterministic"
    overrides: dict[str, int] = {}

    if service.enabled:
        try:
            overrides = await _service_backed_scores(service, job, resume)
            mode = "service"
        except QuotaExceeded:
            logger.warning("scoring_degraded mode=deterministic reason=llm_quota_exceeded")
    else:
        logger.info("scoring_degraded mode=deterministic reason=llm_disabled")

    scores: list[CategoryScore] = []
    for key in keys:
        if key in overrides:
            scores.append(category_scores.make_score(key, overrides[key]))
        elif key == "skills_match" and mode == "service":
            # Weighted by match type; the overlap formula stands in on tier B.
            scores.append(category_scores.make_score(key, _calculate(calculators, "skills_match_weighted")))
        else:
            scores.extend(_compute(calculators, (key,)))
    return scores, mode


def _emergency_categories(calculators: dict[str, Callable[[], int]]) -> list[CategoryScore]:
    scores: list[CategoryScore] = []
    for spec in category_scores.get_category_specs():
        if spec.key in EMERGENCY_COMPUTED:
            try:
                scores.extend(_compute(calculators, (spec.key,)))
                continue
            except Exception as exc:  # noqa: BLE001 - midpoint is the last resort
                logger.warning("emergency_category_midpoint key=%s error=%s", spec.key, exc)
        scores.append(category_scores.midpoint_score(spec.key))
    return scores


def _structure_report(resume: str) -> StructureReport | None:
    try:
        return validate_structure(resume)
    except Exception as exc:  # noqa: BLE001 - the report is optional
        logger.warning("structure_validation_failed error=%s", exc)
        return None


async def score_resume(
    job_description: str,
    resume_content: str,
    *,
    keyword_analysis: KeywordAnalysis | None = None,
    service: ReasoningService | None = None,
) -> ScoreReport:
    """Score a resume against a job description across the fixed categories.

    Degrades from service-backed scoring to deterministic formulas on quota
    errors, to the three basic categories on any other failure, and finally to
    neutral midpoints. Only ``InputInvalid`` escapes.
    """
    job, resume = validate_texts(job_description, resume_content)
    service = service or get_reasoning_service()

    analysis = keyword_analysis
    if analysis is None:
        try:
            analysis = await analyze_keywords(job, resume, service=service)
        except InputInvalid:
            raise
        except Exception as exc:  # noqa: BLE001 - keyword match falls back below
            logger.warning("keyword_analysis_failed error=%s", exc)

    calculators = _deterministic_calculators(job, resume, analysis)
    mode: ScoringMode
    try:
        categories, mode = await _full_categories(service, job, resume, calculators)
    except Exception as exc:  # noqa: BLE001 - degradation ladder
        logger.warning("scoring_degraded mode=basic reason=%s", getattr(exc, "code", type(exc).__name__))
        try:
            categories = _compute(calculators, BASIC_CATEGORIES)
            mode = "basic"
        except Exception as basic_exc:  # noqa: BLE001 - degradation ladder
            logger.error("scoring_degraded mode=emergency reason=%s", basic_exc)
            categories = _emergency_categories(calculators)
            mode = "emergency"

    report = ScoreReport(
        total_score=aggregate(categories),
        category_scores=categories,
        scoring_mode=mode,
        ats=_structure_report(resume),
    )
    logger.info("score_report mode=%s total=%s categories=%s", mode, report.total_score, len(categories))
    return report
