from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator

from .base import CamelModel

ScoringMode = Literal["service", "deterministic", "basic", "emergency"]


class CategoryScore(CamelModel):
    name: str
    max: int = Field(ge=0)
    score: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_budget(self) -> "CategoryScore":
        if self.score > self.max:
            raise ValueError(f"score {self.score} exceeds max {self.max} for '{self.name}'")
        return self


class StructureIssue(CamelModel):
    problematic_text: str = ""
    suggested_fix: str
    reason: str


class StructureReport(CamelModel):
    score: int = Field(ge=0, le=100)
    issues: list[StructureIssue] = Field(default_factory=list)


class ScoreReport(CamelModel):
    total_score: int = Field(ge=0, le=100)
    category_scores: list[CategoryScore]
    scoring_mode: ScoringMode
    ats: StructureReport | None = None
