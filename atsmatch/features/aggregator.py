from __future__ import annotations

from typing import Sequence

from atsmatch.features.category_scores import half_up
from atsmatch.schemas.scoring import CategoryScore


def aggregate(categories: Sequence[CategoryScore]) -> int:
    """Normalize whatever categories were produced onto 0-100."""
    total_max = sum(category.max for category in categories)
    if total_max <= 0:
        return 0
    total = sum(category.score for category in categories)
    return max(0, min(100, half_up(100 * total / total_max)))
