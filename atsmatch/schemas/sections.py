from __future__ import annotations

from enum import Enum

from pydantic import Field

from .base import CamelModel


class SectionLabel(str, Enum):
    SUMMARY = "SUMMARY"
    EXPERIENCE = "EXPERIENCE"
    EDUCATION = "EDUCATION"
    SKILLS = "SKILLS"
    ADDITIONAL = "ADDITIONAL"
    PROJECTS = "PROJECTS"
    AWARDS = "AWARDS"
    CONTENT = "CONTENT"
    IGNORE = "IGNORE"


class SectionBlock(CamelModel):
    text: str = ""
    bold: bool = False
    heading: bool = False
    all_caps: bool | None = Field(
        default=None,
        description="Derived from the text when omitted.",
    )
    label: SectionLabel | None = None
