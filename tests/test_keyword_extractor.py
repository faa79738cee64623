import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atsmatch.core.errors import QuotaExceeded  # noqa: E402
from atsmatch.features.keyword_extractor import (  # noqa: E402
    clean_keyword,
    extract_keywords,
    extract_keywords_fallback,
)
from tests.fakes import FakeAIClient, make_service  # noqa: E402

SCENARIO_JD = "5+ years of Python and AWS experience required. Bachelor's degree preferred."


class FallbackExtractionTests(unittest.TestCase):
    def test_scenario_terms_are_extracted(self):
        keywords = extract_keywords_fallback(SCENARIO_JD)
        texts = [keyword.text for keyword in keywords]
        self.assertEqual(texts, ["5+ years", "python", "aws", "bachelor's degree"])
        for keyword in keywords:
            self.assertEqual(keyword.importance, "required")
            self.assertEqual(keyword.source, "fallback")
            self.assertTrue(keyword.context)

    def test_frequency_ranking_keeps_first_appearance_for_ties(self):
        jd = "Docker and Kubernetes. We love Kubernetes. Kubernetes on AWS with Docker."
        texts = [keyword.text for keyword in extract_keywords_fallback(jd)]
        self.assertEqual(texts[:3], ["kubernetes", "docker", "aws"])

    def test_capitalized_proper_nouns_are_collected(self):
        texts = [keyword.text for keyword in extract_keywords_fallback("Experience with Snowplow and Airflow pipelines.")]
        self.assertIn("snowplow", texts)
        self.assertIn("airflow", texts)
        self.assertNotIn("experience", texts)

    def test_result_is_truncated(self):
        jd = " ".join(
            [
                "Python Java TypeScript Ruby PHP Swift Kotlin Scala Rust SQL HTML CSS",
                "React Angular Django Flask FastAPI Docker Terraform Jenkins",
            ]
        )
        self.assertEqual(len(extract_keywords_fallback(jd)), 15)

    def test_empty_text_yields_no_keywords(self):
        self.assertEqual(extract_keywords_fallback("   "), [])


class ServiceExtractionTests(unittest.IsolatedAsyncioTestCase):
    async def test_service_keywords_are_cleaned_and_deduplicated(self):
        client = FakeAIClient(
            [
                {
                    "keywords": [
                        {"keyword": "Experience with Python", "importance": "required", "context": "Python"},
                        {"keyword": "python", "importance": "preferred", "context": "dup"},
                        {"keyword": "Kubernetes experience", "importance": "preferred", "context": "K8s"},
                        {"keyword": "Knowledge of SQL", "importance": "bogus", "context": ""},
                    ]
                }
            ]
        )
        keywords = await extract_keywords("irrelevant", service=make_service(client))
        self.assertEqual([keyword.text for keyword in keywords], ["python", "kubernetes", "sql"])
        self.assertEqual([keyword.importance for keyword in keywords], ["required", "preferred", "required"])
        self.assertTrue(all(keyword.source == "service" for keyword in keywords))

    async def test_service_list_is_limited(self):
        items = [{"keyword": f"skill {index}", "importance": "required", "context": ""} for index in range(30)]
        keywords = await extract_keywords("irrelevant", service=make_service(FakeAIClient([{"keywords": items}])))
        self.assertEqual(len(keywords), 15)

    async def test_empty_service_list_falls_back(self):
        client = FakeAIClient([{"keywords": []}] * 3)
        keywords = await extract_keywords(SCENARIO_JD, service=make_service(client))
        self.assertIn("python", [keyword.text for keyword in keywords])
        self.assertTrue(all(keyword.source == "fallback" for keyword in keywords))

    async def test_service_errors_fall_back(self):
        client = FakeAIClient([QuotaExceeded("quota")])
        keywords = await extract_keywords(SCENARIO_JD, service=make_service(client))
        self.assertEqual(keywords[1].text, "python")
        self.assertEqual(len(client.models), 1)

    async def test_unparseable_service_output_falls_back(self):
        client = FakeAIClient(["not json"] * 3)
        keywords = await extract_keywords(SCENARIO_JD, service=make_service(client))
        self.assertTrue(all(keyword.source == "fallback" for keyword in keywords))

    async def test_disabled_service_uses_fallback(self):
        keywords = await extract_keywords(SCENARIO_JD, service=make_service(None))
        self.assertEqual(keywords[-1].text, "bachelor's degree")


class CleanKeywordTests(unittest.TestCase):
    def test_filler_is_stripped(self):
        self.assertEqual(clean_keyword("  Proficiency in   React "), "react")
        self.assertEqual(clean_keyword("AWS knowledge"), "aws")
        self.assertEqual(clean_keyword("Familiarity with Docker."), "docker")


if __name__ == "__main__":
    unittest.main()
