from .matching_service import analyze_keywords, keyword_analysis_score
from .scoring_service import score_resume

__all__ = ["analyze_keywords", "keyword_analysis_score", "score_resume"]
