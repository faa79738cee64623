from functools import lru_cache

from .local_taxonomy import LocalTaxonomy
from .patterns import KeywordPattern, get_keyword_patterns
from .provider import TaxonomyProvider


@lru_cache(maxsize=1)
def get_default_taxonomy_provider() -> TaxonomyProvider:
    return LocalTaxonomy()


__all__ = [
    "TaxonomyProvider",
    "LocalTaxonomy",
    "KeywordPattern",
    "get_default_taxonomy_provider",
    "get_keyword_patterns",
]
