from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

# Term boundaries that also respect symbols common in tech names (c++, c#, .net).
_LEFT = r"(?<![\w+#])"
_RIGHT = r"(?![\w+#])"


@dataclass(frozen=True)
class KeywordPattern:
    category: str
    term: str | None
    regex: re.Pattern[str]

    def term_for(self, match: re.Match[str]) -> str:
        if self.term is not None:
            return self.term
        return " ".join(match.group(0).lower().split())


def _literal(category: str, term: str, *aliases: str) -> KeywordPattern:
    alternatives = sorted({term, *aliases}, key=len, reverse=True)
    body = "|".join(re.escape(alt).replace(r"\ ", r"[\s-]+") for alt in alternatives)
    return KeywordPattern(category, term, re.compile(f"{_LEFT}(?:{body}){_RIGHT}", re.IGNORECASE))


def _regex(category: str, term: str | None, pattern: str) -> KeywordPattern:
    return KeywordPattern(category, term, re.compile(pattern, re.IGNORECASE))


_LIBRARY: tuple[KeywordPattern, ...] = (
    # languages
    _literal("languages", "python", "python3"),
    _literal("languages", "java"),
    _literal("languages", "javascript", "ecmascript"),
    _literal("languages", "typescript"),
    _literal("languages", "c++", "cpp"),
    _literal("languages", "c#", "csharp"),
    _literal("languages", "golang"),
    _literal("languages", "ruby"),
    _literal("languages", "php"),
    _literal("languages", "swift"),
    _literal("languages", "kotlin"),
    _literal("languages", "scala"),
    _literal("languages", "rust"),
    _literal("languages", "sql"),
    _literal("languages", "html", "html5"),
    _literal("languages", "css", "css3"),
    _literal("languages", "bash", "shell scripting"),
    # frameworks
    _literal("frameworks", "react", "react.js", "reactjs"),
    _literal("frameworks", "react native"),
    _literal("frameworks", "angular", "angularjs"),
    _literal("frameworks", "vue", "vue.js", "vuejs"),
    _literal("frameworks", "node.js", "nodejs"),
    _literal("frameworks", "next.js", "nextjs"),
    _literal("frameworks", "express"),
    _literal("frameworks", "django"),
    _literal("frameworks", "flask"),
    _literal("frameworks", "fastapi"),
    _literal("frameworks", "spring boot"),
    _literal("frameworks", ".net", "dotnet", "asp.net"),
    _literal("frameworks", "ruby on rails", "rails"),
    _literal("frameworks", "tensorflow"),
    _literal("frameworks", "pytorch"),
    _literal("frameworks", "pandas"),
    _literal("frameworks", "numpy"),
    _literal("frameworks", "scikit-learn", "sklearn"),
    # databases
    _literal("databases", "mysql"),
    _literal("databases", "postgresql", "postgres"),
    _literal("databases", "mongodb"),
    _literal("databases", "redis"),
    _literal("databases", "oracle"),
    _literal("databases", "dynamodb"),
    _literal("databases", "cassandra"),
    _literal("databases", "elasticsearch"),
    _literal("databases", "snowflake"),
    _literal("databases", "nosql"),
    # cloud platforms
    _literal("cloud", "aws", "amazon web services"),
    _literal("cloud", "azure"),
    _literal("cloud", "gcp", "google cloud", "google cloud platform"),
    _literal("cloud", "heroku"),
    # tools and methodologies
    _literal("tools", "docker"),
    _literal("tools", "kubernetes", "k8s"),
    _literal("tools", "terraform"),
    _literal("tools", "ansible"),
    _literal("tools", "jenkins"),
    _literal("tools", "git"),
    _literal("tools", "ci/cd", "continuous integration"),
    _literal("tools", "jira"),
    _literal("tools", "linux"),
    _literal("tools", "tableau"),
    _literal("tools", "power bi"),
    _literal("tools", "excel"),
    _literal("tools", "salesforce"),
    _literal("tools", "graphql"),
    _literal("tools", "rest api", "restful", "rest apis"),
    _literal("tools", "microservices"),
    _literal("tools", "agile"),
    _literal("tools", "scrum"),
    _literal("tools", "kanban"),
    _literal("tools", "devops"),
    _literal("tools", "tdd", "test driven development", "test-driven development"),
    # soft skills
    _literal("soft_skills", "communication"),
    _literal("soft_skills", "leadership"),
    _literal("soft_skills", "teamwork"),
    _literal("soft_skills", "collaboration"),
    _literal("soft_skills", "problem solving", "problem-solving"),
    _literal("soft_skills", "time management"),
    _literal("soft_skills", "critical thinking"),
    _literal("soft_skills", "adaptability"),
    _literal("soft_skills", "stakeholder management"),
    _literal("soft_skills", "mentoring"),
    # certifications
    _literal("certifications", "pmp"),
    _literal("certifications", "cissp"),
    _literal("certifications", "cpa"),
    _literal("certifications", "cfa"),
    _literal("certifications", "ccna"),
    _literal("certifications", "itil"),
    _literal("certifications", "six sigma"),
    _literal("certifications", "comptia"),
    _literal("certifications", "certified scrum master", "csm"),
    _regex("certifications", None, r"\baws certified [a-z]+(?: [a-z]+)?\b"),
    # experience duration phrases
    _regex("experience", None, r"\b\d{1,2}\+?\s*(?:years?|yrs)\b"),
    # education and domain terms
    _regex("domain", "bachelor's degree", r"\bbachelor(?:['’]?s)?(?:\s+degree)?\b"),
    _regex("domain", "master's degree", r"\bmaster(?:['’]?s)?\s+degree\b|\bmasters\b|\bmaster\s+of\b"),
    _regex("domain", "phd", r"\bph\.?d\b\.?|\bdoctorate\b"),
    _literal("domain", "mba"),
    _literal("domain", "computer science"),
    _literal("domain", "machine learning"),
    _literal("domain", "artificial intelligence"),
    _literal("domain", "data analysis", "data analytics"),
    _literal("domain", "data science"),
    _literal("domain", "cybersecurity", "cyber security"),
    _literal("domain", "project management"),
    _literal("domain", "product management"),
    _literal("domain", "sales"),
    _literal("domain", "marketing"),
    _literal("domain", "finance"),
    _literal("domain", "accounting"),
    _literal("domain", "healthcare"),
    _literal("domain", "e-commerce", "ecommerce"),
    _literal("domain", "saas"),
)


@lru_cache(maxsize=1)
def get_keyword_patterns() -> tuple[KeywordPattern, ...]:
    return _LIBRARY

