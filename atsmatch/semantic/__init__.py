from .match_resolver import TierOutcome, build_tiers, direct_tier, resolve_match, semantic_tier, synonym_tier

__all__ = ["TierOutcome", "build_tiers", "direct_tier", "synonym_tier", "semantic_tier", "resolve_match"]
