from __future__ import annotations

import html
import re
from typing import Sequence

from atsmatch.core.scoring_config import get_scoring_value
from atsmatch.schemas.sections import SectionBlock, SectionLabel

_TAG_RE = re.compile(r"<[^>]*>")
_HTML_HINT_RE = re.compile(r"<(?:p|div|h[1-6]|li|ul|ol|br|b|strong|span)\b", re.IGNORECASE)
_BLOCK_BREAK_RE = re.compile(r"</(?:p|div|h[1-6]|li|tr)\s*>|<br\s*/?>", re.IGNORECASE)
_BOLD_RE = re.compile(r"<b[\s>]|<strong\b|font-weight:\s*(?:bold|[6-9]00)", re.IGNORECASE)
_HEADING_RE = re.compile(r"<h[1-6]\b", re.IGNORECASE)
_YEAR_ONLY_RE = re.compile(r"^\d{4}$")
_SEPARATOR_GLYPHS = frozenset({"-", "–", "—", "•", "·"})

# Highest priority first; also the tie-break order.
LABEL_PRIORITY: tuple[SectionLabel, ...] = (
    SectionLabel.SUMMARY,
    SectionLabel.EXPERIENCE,
    SectionLabel.EDUCATION,
    SectionLabel.SKILLS,
    SectionLabel.ADDITIONAL,
    SectionLabel.PROJECTS,
    SectionLabel.AWARDS,
    SectionLabel.CONTENT,
)
_SUBSTANTIVE = LABEL_PRIORITY[:-1]

_HEADER_WEIGHT = 10
_BODY_WEIGHT = 5
_DATE_WEIGHT = 7

_RULES: tuple[tuple[re.Pattern[str], SectionLabel, int], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), label, weight)
    for pattern, label, weight in (
        (r"\b(?:summary|profile|objective|about me)\b", SectionLabel.SUMMARY, _HEADER_WEIGHT),
        (r"\b(?:experience|employment|work history|professional|career)\b", SectionLabel.EXPERIENCE, _HEADER_WEIGHT),
        (r"\b(?:education|degree|academic|university|college|school)\b", SectionLabel.EDUCATION, _HEADER_WEIGHT),
        (r"\b(?:skills|expertise|technologies|competencies|proficiencies)\b", SectionLabel.SKILLS, _HEADER_WEIGHT),
        (
            r"\b(?:additional|certifications|certificates|credentials|languages|interests|activities|volunteer)\b",
            SectionLabel.ADDITIONAL,
            _HEADER_WEIGHT,
        ),
        (r"\b(?:projects|portfolio|achievements)\b", SectionLabel.PROJECTS, _HEADER_WEIGHT),
        (r"\b(?:awards|honors|recognitions)\b", SectionLabel.AWARDS, _HEADER_WEIGHT),
        (r"responsible for|managed|led|developed|created|implemented|designed", SectionLabel.EXPERIENCE, _BODY_WEIGHT),
        (r"\b(?:gpa|graduated|bachelor|master|phd|mba|bs|ba|ms)\b", SectionLabel.EDUCATION, _BODY_WEIGHT),
        (r"\bproficient\s+in\b|\bfamiliar\s+with\b|\bknowledge\s+of\b|\bexpertise\s+in\b", SectionLabel.SKILLS, _BODY_WEIGHT),
        (r"\b(?:certified|certificate|certification|completed course)\b", SectionLabel.ADDITIONAL, _BODY_WEIGHT),
        (r"\b(?:developed|built|created|designed|implemented)\s+a\b", SectionLabel.PROJECTS, _BODY_WEIGHT),
        (r"\b(?:award|recipient|recognized|honor|achievement)\b", SectionLabel.AWARDS, _BODY_WEIGHT),
        (r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\b.+\b(?:20\d{2}|19\d{2})\b", SectionLabel.EXPERIENCE, _DATE_WEIGHT),
        (r"\b(?:20\d{2}|19\d{2})\b.+\b(?:present|current|now)\b", SectionLabel.EXPERIENCE, _DATE_WEIGHT),
        (r"\b(?:20\d{2}|19\d{2})\b.+(?:\bto\b|–|-).+\b(?:20\d{2}|19\d{2}|present)\b", SectionLabel.EXPERIENCE, _DATE_WEIGHT),
    )
)

_JOB_TITLE_RE = re.compile(
    r"\b(?:manager|director|engineer|specialist|analyst|coordinator|supervisor|lead|executive|officer|"
    r"president|vp|vice president)\b",
    re.IGNORECASE,
)
_YEAR_RE = re.compile(r"\b(?:20\d{2}|19\d{2})\b")
_DEGREE_INSTITUTION_RE = re.compile(
    r"\b(?:bachelor|master|phd|mba|bs|ba|ms)\b.+\b(?:university|college|institute|school)\b",
    re.IGNORECASE,
)


def strip_markup(text: str) -> str:
    return " ".join(html.unescape(_TAG_RE.sub(" ", text or "")).split())


def _is_all_caps(text: str) -> bool:
    return len(text) > 3 and any(ch.isalpha() for ch in text) and text == text.upper()


def _label_scores(plain: str, *, formatted_header: bool, formatted: bool, all_caps: bool) -> dict[SectionLabel, int]:
    short_chars = int(get_scoring_value("sections.short_text_chars", 30))
    is_short = len(plain) < short_chars
    scores = {label: 0 for label in LABEL_PRIORITY}

    if is_short and formatted_header:
        bonus = int(get_scoring_value("sections.header_bonus", 2))
        if all_caps:
            bonus += int(get_scoring_value("sections.all_caps_bonus", 3))
        for label in _SUBSTANTIVE:
            scores[label] += bonus

    match_bonus = int(get_scoring_value("sections.formatted_match_bonus", 3))
    for pattern, label, weight in _RULES:
        if pattern.search(plain):
            scores[label] += weight
            if is_short and formatted:
                scores[label] += match_bonus

    if _JOB_TITLE_RE.search(plain) and _YEAR_RE.search(plain):
        scores[SectionLabel.EXPERIENCE] += int(get_scoring_value("sections.experience_title_year_bonus", 8))
    if _DEGREE_INSTITUTION_RE.search(plain):
        scores[SectionLabel.EDUCATION] += int(get_scoring_value("sections.education_degree_institution_bonus", 8))
    if plain.count(",") >= int(get_scoring_value("sections.skills_list_min_commas", 3)) and len(plain) < int(
        get_scoring_value("sections.skills_list_max_chars", 200)
    ):
        scores[SectionLabel.SKILLS] += int(get_scoring_value("sections.skills_list_bonus", 5))

    scores[SectionLabel.CONTENT] += int(get_scoring_value("sections.content_baseline", 2))
    return scores


def classify_section(block: SectionBlock) -> SectionLabel:
    """Assign one section label to a block using weighted rule scoring.

    Markup is stripped before matching. Empty text, a bare year or a lone
    separator glyph is IGNORE. Ties resolve by ``LABEL_PRIORITY``.
    """
    plain = strip_markup(block.text)
    if len(plain) < 3 or _YEAR_ONLY_RE.match(plain) or plain in _SEPARATOR_GLYPHS:
        return SectionLabel.IGNORE

    all_caps = block.all_caps if block.all_caps is not None else _is_all_caps(plain)
    scores = _label_scores(
        plain,
        formatted_header=block.bold or block.heading,
        formatted=block.bold or block.heading or all_caps,
        all_caps=all_caps,
    )

    best = LABEL_PRIORITY[0]
    for label in LABEL_PRIORITY[1:]:
        if scores[label] > scores[best]:
            best = label
    return best


def header_label(block: SectionBlock) -> SectionLabel | None:
    """Return the section a block opens, or None when it reads as body content."""
    label = block.label or classify_section(block)
    if label not in _SUBSTANTIVE:
        return None
    plain = strip_markup(block.text)
    all_caps = block.all_caps if block.all_caps is not None else _is_all_caps(plain)
    if len(plain) >= int(get_scoring_value("sections.short_text_chars", 30)):
        return None
    if block.bold or block.heading or all_caps or plain.endswith(":"):
        return label
    header_rules = [pattern for pattern, rule_label, weight in _RULES if weight == _HEADER_WEIGHT and rule_label == label]
    if len(plain.split()) <= 3 and any(pattern.search(plain) for pattern in header_rules):
        return label
    return None


def classify_blocks(blocks: Sequence[SectionBlock]) -> list[SectionBlock]:
    return [block.model_copy(update={"label": classify_section(block)}) for block in blocks]


def block_from_html(fragment: str) -> SectionBlock:
    """Build a block from an HTML fragment, deriving bold/heading hints from markup."""
    raw = fragment or ""
    return SectionBlock(
        text=strip_markup(raw),
        bold=bool(_BOLD_RE.search(raw)),
        heading=bool(_HEADING_RE.search(raw)),
    )


def split_resume_blocks(content: str) -> list[SectionBlock]:
    """Split resume HTML (by block elements) or plain text (by line) into blocks."""
    if not content or not content.strip():
        return []

    if _HTML_HINT_RE.search(content):
        blocks = [block_from_html(chunk) for chunk in _BLOCK_BREAK_RE.split(content)]
        return [block for block in blocks if block.text]

    return [SectionBlock(text=line.strip()) for line in content.splitlines() if line.strip()]
