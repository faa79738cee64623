from .aggregator import aggregate
from .keyword_extractor import extract_keywords, extract_keywords_fallback
from .section_classifier import block_from_html, classify_blocks, classify_section, split_resume_blocks
from .structure_validator import validate_structure

__all__ = [
    "aggregate",
    "extract_keywords",
    "extract_keywords_fallback",
    "block_from_html",
    "classify_blocks",
    "classify_section",
    "split_resume_blocks",
    "validate_structure",
]
