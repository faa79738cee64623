from __future__ import annotations

from pydantic import Field

from .base import CamelModel
from .keywords import KeywordAnalysis
from .sections import SectionBlock


class MatchRequest(CamelModel):
    job_description: str = ""
    resume_content: str = ""


class ScoreRequest(CamelModel):
    job_description: str = ""
    resume_content: str = ""
    keyword_analysis: KeywordAnalysis | None = None


class ClassifySectionsRequest(CamelModel):
    content: str = ""
    blocks: list[SectionBlock] = Field(default_factory=list, max_length=500)


class ClassifySectionsResponse(CamelModel):
    blocks: list[SectionBlock]
