from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from atsmatch.core.scoring_config import get_scoring_value
from atsmatch.features.section_classifier import classify_blocks, header_label, split_resume_blocks, strip_markup
from atsmatch.schemas.scoring import StructureIssue, StructureReport
from atsmatch.schemas.sections import SectionLabel

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_PHONE_RE = re.compile(r"(?:\+?\d{1,3}[\s.-]?)?(?:\(\d{3}\)|\d{3})[\s.-]?\d{3}[\s.-]?\d{4}\b")
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")


@dataclass
class _Section:
    label: SectionLabel
    title: str
    lines: list[str] = field(default_factory=list)

    @property
    def content(self) -> str:
        return "\n".join(self.lines)


def group_sections(resume_text: str) -> list[_Section]:
    """Classify resume blocks and fold body blocks into the preceding header."""
    sections: list[_Section] = []
    current: _Section | None = None
    for block in classify_blocks(split_resume_blocks(resume_text)):
        if block.label == SectionLabel.IGNORE:
            continue
        label = header_label(block)
        plain = strip_markup(block.text)
        if label is not None:
            if current is not None and current.label == label:
                continue
            current = _Section(label=label, title=plain)
            sections.append(current)
        elif current is not None:
            current.lines.append(plain)
    return sections


def _has_contact_info(resume_text: str) -> bool:
    return bool(_EMAIL_RE.search(resume_text) or _PHONE_RE.search(resume_text))


def _section_issues(section: _Section) -> list[StructureIssue]:
    content = section.content.lower()
    issues: list[StructureIssue] = []
    if section.label == SectionLabel.EXPERIENCE:
        if "•" not in content and "-" not in content:
            issues.append(
                StructureIssue(
                    problematic_text=section.content,
                    suggested_fix="Format experience using bullet points",
                    reason="Experience section should use bullet points for better ATS parsing",
                )
            )
        if not _YEAR_RE.search(content):
            issues.append(
                StructureIssue(
                    problematic_text=section.content,
                    suggested_fix="Add clear dates for each position",
                    reason="Experience entries should include dates",
                )
            )
    elif section.label == SectionLabel.EDUCATION:
        if not any(token in content for token in ("degree", "bachelor", "master")):
            issues.append(
                StructureIssue(
                    problematic_text=section.content,
                    suggested_fix="Clearly state your degree type",
                    reason="Education section should specify degree type",
                )
            )
    elif section.label == SectionLabel.SKILLS:
        min_chars = int(get_scoring_value("structure_validation.skills_min_chars", 50))
        if len(content) > min_chars and not any(marker in content for marker in (":", "•", "-")):
            issues.append(
                StructureIssue(
                    problematic_text=section.content,
                    suggested_fix="Organize skills into categories with clear formatting",
                    reason="Skills should be clearly categorized and formatted for ATS systems",
                )
            )
    return issues


def validate_structure(resume_text: str) -> StructureReport:
    sections = group_sections(resume_text)
    issues: list[StructureIssue] = []

    if not _has_contact_info(resume_text):
        issues.append(
            StructureIssue(
                suggested_fix="Add a contact section with your email and phone number",
                reason="Missing contact information section",
            )
        )
    if not any(section.label == SectionLabel.SUMMARY for section in sections):
        issues.append(
            StructureIssue(
                suggested_fix="Add a professional summary section highlighting your key qualifications",
                reason="Missing professional summary section",
            )
        )
    for section in sections:
        issues.extend(_section_issues(section))

    penalty = int(get_scoring_value("structure_validation.issue_penalty", 10))
    score = max(0, 100 - penalty * len(issues))
    logger.info("structure_validated sections=%s issues=%s score=%s", len(sections), len(issues), score)
    return StructureReport(score=score, issues=issues)
