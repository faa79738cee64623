import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atsmatch.taxonomy import get_keyword_patterns  # noqa: E402
from atsmatch.taxonomy.local_taxonomy import LocalTaxonomy  # noqa: E402


class TaxonomyTests(unittest.TestCase):
    def test_variant_resolves_to_canonical_form(self):
        taxonomy = LocalTaxonomy()
        self.assertEqual(taxonomy.canonical_form("PostgreSQL"), "sql")
        self.assertEqual(taxonomy.canonical_form("  Kubernetes "), "kubernetes")
        self.assertEqual(taxonomy.canonical_form("cobol"), "cobol")

    def test_variants_include_canonical_first(self):
        taxonomy = LocalTaxonomy()
        variants = taxonomy.variants("k8s")
        self.assertEqual(variants[0], "kubernetes")
        self.assertIn("k8s", variants)
        self.assertEqual(taxonomy.variants("cobol"), ())

    def test_synonym_table_is_read_only(self):
        taxonomy = LocalTaxonomy()
        with self.assertRaises(TypeError):
            taxonomy.synonyms["new"] = ("x",)  # type: ignore[index]

    def test_pattern_library_respects_symbol_boundaries(self):
        patterns = {pattern.term: pattern for pattern in get_keyword_patterns() if pattern.term}
        self.assertIsNotNone(patterns["c++"].regex.search("Strong C++ skills"))
        self.assertIsNone(patterns["java"].regex.search("JavaScript only"))
        degree = patterns["bachelor's degree"]
        self.assertIsNotNone(degree.regex.search("Bachelor's degree preferred"))


if __name__ == "__main__":
    unittest.main()
