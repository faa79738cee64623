from contextlib import asynccontextmanager
import logging

from atsmatch.ai.service import get_reasoning_service
from atsmatch.features.category_scores import get_category_specs
from atsmatch.taxonomy import get_default_taxonomy_provider, get_keyword_patterns

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    specs = get_category_specs()
    taxonomy = get_default_taxonomy_provider()
    patterns = get_keyword_patterns()
    service = get_reasoning_service()
    logger.info(
        "startup_warmup categories=%s synonyms=%s patterns=%s reasoning_service=%s",
        len(specs),
        len(taxonomy.synonyms),
        len(patterns),
        "enabled" if service.enabled else "disabled",
    )
    yield
