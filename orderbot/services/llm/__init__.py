from orderbot.config import Settings
from orderbot.services.llm.base import LLMError, LLMProvider, LLMResponse
from orderbot.services.llm.gemini_provider import GeminiProvider
from orderbot.services.llm.openai_provider import OpenAIProvider

__all__ = [
    "LLMError",
    "LLMProvider",
    "LLMResponse",
    "GeminiProvider",
    "OpenAIProvider",
    "build_llm_provider",
]


def build_llm_provider(settings: Settings) -> LLMProvider:
    """Create the provider selected by LLM_PROVIDER."""
    if settings.llm_provider == "openai":
        provider_cls = OpenAIProvider
    else:
        provider_cls = GeminiProvider

    kwargs = {"api_key": settings.llm_api_key, "timeout_seconds": settings.llm_timeout_seconds}
    if settings.llm_model:
        kwargs["default_model"] = settings.llm_model
    return provider_cls(**kwargs)
