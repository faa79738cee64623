from __future__ import annotations

import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Sequence

from atsmatch.core.scoring_config import get_scoring_terms, get_scoring_value
from atsmatch.schemas.keywords import MatchResult
from atsmatch.schemas.scoring import CategoryScore

_WORD_RE = re.compile(r"\w+")
_YEARS_RE = re.compile(r"(\d+)\+?\s*(?:years?|yrs)\b", re.IGNORECASE)
_FORMAT_RED_FLAGS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\|"),
    re.compile("•"),
    re.compile(r"\[.*?\]"),
    re.compile(r"<.*?>"),
    re.compile(r"\t"),
    re.compile(r"[^\x00-\x7F]"),
)
_GRAMMAR_ANOMALIES: tuple[re.Pattern[str], ...] = (
    re.compile(r" {2,}"),
    re.compile(r"[a-z]{2}[.!?][A-Z]"),
    re.compile(r"[ \t]+[,.!?]"),
    re.compile(r"\bi\b"),
)
_PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t]*\n")


@dataclass(frozen=True)
class CategorySpec:
    key: str
    name: str
    max: int
    midpoint: int


@lru_cache(maxsize=1)
def get_category_specs() -> tuple[CategorySpec, ...]:
    raw = get_scoring_value("categories", [])
    if not isinstance(raw, list) or not raw:
        raise RuntimeError("Scoring config must define a non-empty 'categories' list.")
    specs = tuple(
        CategorySpec(
            key=str(item["key"]),
            name=str(item["name"]),
            max=int(item["max"]),
            midpoint=int(item["midpoint"]),
        )
        for item in raw
    )
    for spec in specs:
        if not 0 <= spec.midpoint <= spec.max:
            raise RuntimeError(f"Midpoint for '{spec.key}' must lie within [0, {spec.max}].")
    return specs


def category_spec(key: str) -> CategorySpec:
    for spec in get_category_specs():
        if spec.key == key:
            return spec
    raise KeyError(key)


def half_up(value: float) -> int:
    """Round half away from zero for non-negative inputs (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def make_score(key: str, score: int) -> CategoryScore:
    spec = category_spec(key)
    return CategoryScore(name=spec.name, max=spec.max, score=max(0, min(spec.max, int(score))))


def midpoint_score(key: str) -> CategoryScore:
    return make_score(key, category_spec(key).midpoint)


def keyword_match(results: Sequence[MatchResult]) -> int:
    total = len(results)
    if total == 0:
        return 0
    matched = sum(1 for result in results if result.found)
    return half_up(category_spec("keyword_match").max * matched / total)


def role_alignment(job_description: str, resume: str) -> int:
    budget = category_spec("role_alignment").max
    titles = get_scoring_terms("role_alignment.titles")
    if not titles:
        return 0
    job_lower = job_description.lower()
    resume_lower = resume.lower()
    hits = sum(1 for title in titles if title in job_lower and title in resume_lower)
    cap = int(get_scoring_value("role_alignment.title_vocab_cap", 5))
    denominator = min(cap, len(titles))
    return min(budget, half_up(budget * hits / denominator))


def skills_match(job_description: str, resume: str) -> int:
    budget = category_spec("skills_match").max
    technical = get_scoring_terms("skills_match.technical")
    soft = get_scoring_terms("skills_match.soft")
    tech_weight = float(get_scoring_value("skills_match.technical_weight", 0.7))
    soft_weight = float(get_scoring_value("skills_match.soft_weight", 0.3))
    cap = float(get_scoring_value("skills_match.max_weighted_cap", 8))

    job_lower = job_description.lower()
    resume_lower = resume.lower()
    tech_overlap = sum(1 for term in technical if term in job_lower and term in resume_lower)
    soft_overlap = sum(1 for term in soft if term in job_lower and term in resume_lower)

    weighted = tech_weight * tech_overlap + soft_weight * soft_overlap
    max_weighted = min(cap, tech_weight * len(technical) + soft_weight * len(soft))
    if max_weighted <= 0:
        return 0
    return min(budget, half_up(budget * weighted / max_weighted))


def skills_match_weighted(results: Sequence[MatchResult]) -> int:
    """Skills Match from resolved keywords, weighting each found keyword by how it matched."""
    total = len(results)
    if total == 0:
        return 0
    budget = category_spec("skills_match").max
    direct = float(get_scoring_value("skills_match.match_weights.direct", 1.0))
    synonym = float(get_scoring_value("skills_match.match_weights.synonym", 0.8))
    semantic_default = float(get_scoring_value("skills_match.match_weights.semantic_default", 0.6))

    weighted = 0.0
    for result in results:
        if not result.found:
            continue
        if result.match_type == "direct":
            weighted += direct
        elif result.match_type == "synonym":
            weighted += synonym
        else:
            # A zero semantic confidence takes the default weight.
            weighted += result.confidence or semantic_default
    return min(budget, half_up(budget * weighted / total))


def achievements(resume: str) -> int:
    budget = category_spec("achievements").max
    indicators = get_scoring_terms("achievements.indicators")
    if not indicators:
        return 0
    resume_lower = resume.lower()
    hits = sum(1 for indicator in indicators if indicator in resume_lower)
    return half_up(budget * hits / len(indicators))


def first_years(text: str) -> int:
    match = _YEARS_RE.search(text or "")
    return int(match.group(1)) if match else 0


def experience_level(job_description: str, resume: str) -> int:
    neutral = int(get_scoring_value("experience_level.neutral", 5))
    job_years = first_years(job_description)
    resume_years = first_years(resume)
    if job_years <= 0 or resume_years <= 0:
        return neutral

    ratio = resume_years / job_years
    bands = sorted(
        get_scoring_value("experience_level.bands", []),
        key=lambda band: float(band["ratio"]),
        reverse=True,
    )
    for band in bands:
        if ratio >= float(band["ratio"]):
            return int(band["score"])
    return int(get_scoring_value("experience_level.floor", 4))


def resume_structure(resume: str) -> int:
    budget = category_spec("resume_structure").max
    headers = get_scoring_terms("resume_structure.headers")
    if not headers:
        return 0
    resume_lower = resume.lower()
    hits = sum(1 for header in headers if header in resume_lower)
    return half_up(budget * hits / len(headers))


def customization(job_description: str, resume: str) -> int:
    budget = category_spec("customization").max
    job_tokens = _WORD_RE.findall(job_description.lower())
    if not job_tokens:
        return 0
    resume_tokens = set(_WORD_RE.findall(resume.lower()))
    shared = sum(1 for token in job_tokens if token in resume_tokens)
    return min(budget, half_up(budget * shared / len(job_tokens)))


def format_compatibility(resume: str) -> int:
    budget = category_spec("format_compatibility").max
    red_flags = sum(1 for pattern in _FORMAT_RED_FLAGS if pattern.search(resume))
    return max(0, budget - red_flags)


def grammar(resume: str) -> int:
    budget = category_spec("grammar").max
    anomalies = sum(1 for pattern in _GRAMMAR_ANOMALIES if pattern.search(resume))
    return max(0, budget - anomalies)


def visual_appeal(resume: str) -> int:
    if _PARAGRAPH_BREAK_RE.search(resume):
        return int(get_scoring_value("visual_appeal.with_paragraphs", 2))
    return int(get_scoring_value("visual_appeal.without_paragraphs", 1))
