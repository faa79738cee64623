from __future__ import annotations

from typing import Protocol


class TaxonomyProvider(Protocol):
    def canonical_form(self, term: str) -> str:
        """Return the canonical synonym-table key for ``term`` (or the term itself)."""

    def variants(self, term: str) -> tuple[str, ...]:
        """Return the canonical form plus every configured variant, or ``()``."""
