from resumeos.ai.config import load_ai_config
from resumeos.ai.types import AIClient

from resumeos.ai.providers.gemini_provider import GeminiProvider
from resumeos.ai.providers.openai_provider import OpenAIProvider


def get_ai_client(api_key: str) -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "gemini":
        return GeminiProvider(model=cfg.model, api_key=api_key, timeout_s=cfg.timeout_s)

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model, api_key=api_key, timeout_s=cfg.timeout_s)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
