from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator

from .base import CamelModel

Importance = Literal["required", "preferred"]
KeywordSource = Literal["service", "fallback"]
MatchType = Literal["direct", "synonym", "semantic", "none"]


class Keyword(CamelModel):
    text: str = Field(min_length=1)
    importance: Importance = "required"
    context: str = ""
    source: KeywordSource = "fallback"


class MatchResult(CamelModel):
    keyword: str
    found: bool
    match_type: MatchType = "none"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    explanation: str = ""
    importance: Importance | None = None
    context: str | None = None

    @model_validator(mode="after")
    def _check_match_invariant(self) -> "MatchResult":
        if self.match_type == "none":
            if self.found or self.confidence != 0.0:
                raise ValueError("match_type 'none' requires found=false and confidence=0")
        elif not self.found:
            raise ValueError(f"match_type '{self.match_type}' requires found=true")
        return self

    @classmethod
    def not_found(cls, keyword: Keyword | str, explanation: str) -> "MatchResult":
        return cls.for_keyword(keyword, found=False, match_type="none", confidence=0.0, explanation=explanation)

    @classmethod
    def for_keyword(
        cls,
        keyword: Keyword | str,
        *,
        found: bool,
        match_type: MatchType,
        confidence: float,
        explanation: str,
    ) -> "MatchResult":
        if isinstance(keyword, Keyword):
            return cls(
                keyword=keyword.text,
                found=found,
                match_type=match_type,
                confidence=confidence,
                explanation=explanation,
                importance=keyword.importance,
                context=keyword.context or None,
            )
        return cls(
            keyword=keyword,
            found=found,
            match_type=match_type,
            confidence=confidence,
            explanation=explanation,
        )


class KeywordAnalysis(CamelModel):
    keywords: list[MatchResult] = Field(default_factory=list)
    score: int = Field(default=0, ge=0, le=100)

    @property
    def matched_count(self) -> int:
        return sum(1 for result in self.keywords if result.found)
