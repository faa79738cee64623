from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .provider import TaxonomyProvider


def _normalize(term: str) -> str:
    return " ".join(term.strip().lower().split())


class LocalTaxonomy(TaxonomyProvider):
    def __init__(self, synonyms_path: str | Path | None = None) -> None:
        path = Path(synonyms_path) if synonyms_path else Path(__file__).with_name("synonyms.json")
        self._synonyms = self._load_synonyms(path)
        self._variant_index = self._build_variant_index(self._synonyms)

    @staticmethod
    def _load_synonyms(path: Path) -> Mapping[str, tuple[str, ...]]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        if not isinstance(raw, dict):
            raise RuntimeError(f"Synonym table '{path}' must be a JSON object.")
        table: dict[str, tuple[str, ...]] = {}
        for key, values in raw.items():
            canonical = _normalize(str(key))
            variants = tuple(_normalize(str(value)) for value in values if str(value).strip())
            table[canonical] = variants
        return MappingProxyType(table)

    @staticmethod
    def _build_variant_index(table: Mapping[str, tuple[str, ...]]) -> Mapping[str, str]:
        index: dict[str, str] = {}
        for canonical, variants in table.items():
            for variant in variants:
                # First canonical in file order owns a shared variant.
                index.setdefault(variant, canonical)
        return MappingProxyType(index)

    @property
    def synonyms(self) -> Mapping[str, tuple[str, ...]]:
        return self._synonyms

    def canonical_form(self, term: str) -> str:
        normalized = _normalize(term)
        if normalized in self._synonyms:
            return normalized
        return self._variant_index.get(normalized, normalized)

    def variants(self, term: str) -> tuple[str, ...]:
        canonical = self.canonical_form(term)
        if canonical not in self._synonyms:
            return ()
        return (canonical, *self._synonyms[canonical])
