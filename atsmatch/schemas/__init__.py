from .api import ClassifySectionsRequest, ClassifySectionsResponse, MatchRequest, ScoreRequest
from .keywords import Importance, Keyword, KeywordAnalysis, KeywordSource, MatchResult, MatchType
from .scoring import CategoryScore, ScoreReport, ScoringMode, StructureIssue, StructureReport
from .sections import SectionBlock, SectionLabel

__all__ = [
    "Importance",
    "Keyword",
    "KeywordSource",
    "MatchType",
    "MatchResult",
    "KeywordAnalysis",
    "CategoryScore",
    "ScoringMode",
    "ScoreReport",
    "StructureIssue",
    "StructureReport",
    "SectionBlock",
    "SectionLabel",
    "MatchRequest",
    "ScoreRequest",
    "ClassifySectionsRequest",
    "ClassifySectionsResponse",
]
