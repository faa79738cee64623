from atsmatch.ai.config import AIConfig, load_ai_config
from atsmatch.ai.types import AIClient

from atsmatch.ai.providers.openai_provider import OpenAIProvider


def get_ai_client(cfg: AIConfig | None = None) -> AIClient | None:
    """Build the configured provider client, or ``None`` when it has no credentials."""
    cfg = cfg or load_ai_config()

    if cfg.provider == "openai":
        if not cfg.configured:
            return None
        return OpenAIProvider(api_key=cfg.api_key, base_url=cfg.base_url)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
