import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atsmatch.features import category_scores as cs  # noqa: E402
from atsmatch.features.aggregator import aggregate  # noqa: E402
from atsmatch.schemas.keywords import MatchResult  # noqa: E402
from atsmatch.schemas.scoring import CategoryScore  # noqa: E402


def _results(found: int, total: int) -> list[MatchResult]:
    results = []
    for index in range(total):
        if index < found:
            results.append(
                MatchResult(keyword=f"k{index}", found=True, match_type="direct", confidence=1.0)
            )
        else:
            results.append(MatchResult(keyword=f"k{index}", found=False))
    return results


class CategoryScoreTests(unittest.TestCase):
    def test_half_up_rounding(self):
        self.assertEqual(cs.half_up(2.5), 3)
        self.assertEqual(cs.half_up(0.5), 1)
        self.assertEqual(cs.half_up(2.49), 2)

    def test_keyword_match_formula(self):
        self.assertEqual(cs.keyword_match([]), 0)
        self.assertEqual(cs.keyword_match(_results(2, 3)), 13)
        self.assertEqual(cs.keyword_match(_results(1, 2)), 10)
        self.assertEqual(cs.keyword_match(_results(1, 8)), 3)
        for total in range(1, 16):
            for found in range(total + 1):
                expected = cs.half_up(20 * found / total)
                self.assertEqual(cs.keyword_match(_results(found, total)), expected)

    def test_role_alignment_counts_shared_titles(self):
        self.assertEqual(cs.role_alignment("Senior Engineer", "Senior Engineer at Acme"), 6)
        self.assertEqual(cs.role_alignment("Senior Engineer", "Barista"), 0)

    def test_role_alignment_matches_titles_inside_words(self):
        self.assertEqual(cs.role_alignment("Team Lead", "Leadership of a team"), 3)

    def test_skills_match_weighted_by_match_type(self):
        results = [
            MatchResult(keyword="python", found=True, match_type="direct", confidence=1.0),
            MatchResult(keyword="postgresql", found=True, match_type="synonym", confidence=0.9),
            MatchResult(keyword="terraform", found=True, match_type="semantic", confidence=0.5),
            MatchResult(keyword="golang", found=False),
        ]
        self.assertEqual(cs.skills_match_weighted(results), 9)
        self.assertEqual(cs.skills_match_weighted(results[:1]), 15)
        self.assertEqual(cs.skills_match_weighted(results[1:2]), 12)
        self.assertEqual(cs.skills_match_weighted(results[3:]), 0)

    def test_skills_match_weighted_semantic_without_confidence_uses_default(self):
        results = [MatchResult(keyword="terraform", found=True, match_type="semantic", confidence=0.0)]
        self.assertEqual(cs.skills_match_weighted(results), 9)

    def test_skills_match_weighted_without_keywords_is_zero(self):
        self.assertEqual(cs.skills_match_weighted([]), 0)

    def test_skills_match_weights_technical_and_soft(self):
        score = cs.skills_match("python aws communication", "python aws communication")
        self.assertEqual(score, 3)
        self.assertEqual(cs.skills_match("python", "gardening"), 0)

    def test_achievements_indicator_hits(self):
        resume = "Increased revenue growth by 20% and reduced costs"
        self.assertEqual(cs.achievements(resume), 6)
        self.assertEqual(cs.achievements("Did things"), 0)

    def test_experience_level_bands(self):
        job = "5+ years of Python"
        self.assertEqual(cs.experience_level(job, "6 years in Python"), 10)
        self.assertEqual(cs.experience_level(job, "4 years in Python"), 8)
        self.assertEqual(cs.experience_level(job, "3 yrs in Python"), 6)
        self.assertEqual(cs.experience_level(job, "2 years in Python"), 4)
        self.assertEqual(cs.experience_level(job, "Python developer"), 5)
        self.assertEqual(cs.experience_level("Python", "6 years"), 5)
        self.assertEqual(cs.experience_level("0 years", "6 years"), 5)

    def test_resume_structure_header_hits(self):
        resume = "Summary\nExperience\nEducation\nSkills"
        self.assertEqual(cs.resume_structure(resume), 7)

    def test_customization_counts_repeated_job_tokens(self):
        self.assertEqual(cs.customization("python aws python", "python"), 7)
        self.assertEqual(cs.customization("!!!", "python"), 0)

    def test_format_compatibility_red_flags(self):
        self.assertEqual(cs.format_compatibility("Plain resume text"), 5)
        self.assertEqual(cs.format_compatibility("Python | AWS"), 4)
        self.assertEqual(cs.format_compatibility("• [tag] <b>x</b>\tcafé |"), 0)

    def test_grammar_anomalies(self):
        self.assertEqual(cs.grammar("I led the team. We shipped."), 3)
        self.assertEqual(cs.grammar("i  did it ."), 0)
        self.assertEqual(cs.grammar("Shipped it.Then left"), 2)

    def test_visual_appeal_paragraph_break(self):
        self.assertEqual(cs.visual_appeal("Summary\n\nExperience"), 2)
        self.assertEqual(cs.visual_appeal("Summary\nExperience"), 1)

    def test_make_score_clamps_into_budget(self):
        self.assertEqual(cs.make_score("grammar", 9).score, 3)
        self.assertEqual(cs.make_score("grammar", -2).score, 0)
        self.assertEqual(cs.midpoint_score("keyword_match").score, 10)


class AggregatorTests(unittest.TestCase):
    def test_total_is_normalized_and_idempotent(self):
        categories = [
            CategoryScore(name="Keyword Match", max=20, score=13),
            CategoryScore(name="Resume Structure", max=10, score=7),
            CategoryScore(name="Format Compatibility", max=5, score=4),
        ]
        total = aggregate(categories)
        self.assertEqual(total, 69)
        self.assertEqual(aggregate(list(categories)), total)

    def test_empty_categories_score_zero(self):
        self.assertEqual(aggregate([]), 0)

    def test_category_score_rejects_overflow(self):
        with self.assertRaises(ValueError):
            CategoryScore(name="Grammar & Spelling", max=3, score=4)


if __name__ == "__main__":
    unittest.main()
