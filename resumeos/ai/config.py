from dataclasses import dataclass

from resumeos.core.config import settings


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    timeout_s: float


def load_ai_config() -> AIConfig:
    return AIConfig(
        provider=settings.ai_provider,
        model=settings.ai_model,
        timeout_s=settings.ai_timeout_s,
    )
