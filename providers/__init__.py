"""Model provider adapters."""
from functools import lru_cache

from config import Config
from providers.base import ModelProvider, ProviderConfigurationError
from providers.gemini import GeminiProvider


@lru_cache
def get_provider() -> ModelProvider:
    """FastAPI dependency returning the process-wide Gemini provider."""
    return GeminiProvider(api_key=Config.GEMINI_API_KEY)


__all__ = [
    "ModelProvider",
    "ProviderConfigurationError",
    "GeminiProvider",
    "get_provider"
]
