import os
from dataclasses import dataclass


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    fallback_model: str | None
    api_key: str | None
    base_url: str | None

    @property
    def configured(self) -> bool:
        key = (self.api_key or "").strip()
        return bool(key) and not _looks_like_placeholder(key)


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = os.getenv("AI_MODEL", "gpt-4o").strip()
    fallback_model = os.getenv("AI_FALLBACK_MODEL", "gpt-4o-mini").strip() or None
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip() or None
    base_url = (os.getenv("OPENAI_BASE_URL") or "").strip() or None
    return AIConfig(
        provider=provider,
        model=model,
        fallback_model=fallback_model,
        api_key=api_key,
        base_url=base_url,
    )
