"""Factory for creating LLM providers."""

from typing import Optional, Dict, Type

from config import settings

from .base import LLMProvider
from .anthropic_provider import AnthropicProvider
from .openai_provider import OpenAIProvider, DeepseekProvider
from .gemini_provider import GeminiProvider
from .litellm_provider import LiteLLMProvider, to_litellm_model


# Registry of directly-supported providers
PROVIDERS: Dict[str, Type[LLMProvider]] = {
    "anthropic": AnthropicProvider,
    "claude": AnthropicProvider,
    "openai": OpenAIProvider,
    "gpt": OpenAIProvider,
    "gemini": GeminiProvider,
    "google": GeminiProvider,
    "deepseek": DeepseekProvider,
}

# Routed through LiteLLM
LITELLM_PROVIDERS = ("litellm", "ollama")

ALIASES = ("claude", "gpt", "google")

# Model prefix -> provider, for auto-detection
MODEL_PROVIDERS: Dict[str, str] = {
    "claude": "anthropic",
    "sonnet": "anthropic",
    "opus": "anthropic",
    "haiku": "anthropic",
    "gpt-": "openai",
    "o1": "openai",
    "gemini": "gemini",
    "deepseek": "deepseek",
    "ollama/": "ollama",
}


def get_provider(
    provider_name: Optional[str] = None,
    model: Optional[str] = None,
) -> LLMProvider:
    """Get an LLM provider instance configured to use `model`.

    Args:
        provider_name: Explicit provider name (anthropic, openai, gemini, deepseek, ollama, litellm)
        model: Model name; without a provider, the provider is detected from it

    Returns:
        LLMProvider instance

    Examples:
        get_provider("openai", "gpt-4o-mini")
        get_provider("ollama", "mistral")      # LiteLLM -> ollama/mistral
        get_provider(model="gemini-2.5-pro")   # Gemini provider
        get_provider()                         # settings.default_provider
    """
    model = model or settings.default_model or None

    if not provider_name and model:
        model_lower = model.lower()
        for prefix, provider in MODEL_PROVIDERS.items():
            if model_lower.startswith(prefix):
                provider_name = provider
                break

    provider_key = (provider_name or settings.default_provider).lower()
    if provider_key in LITELLM_PROVIDERS:
        litellm_model = to_litellm_model(None if provider_key == "litellm" else provider_key, model)
        return LiteLLMProvider(default_model=litellm_model)
    if provider_key not in PROVIDERS:
        raise ValueError(
            f"Unknown provider: {provider_name}. "
            f"Available: {list(PROVIDERS.keys()) + list(LITELLM_PROVIDERS)}"
        )
    return PROVIDERS[provider_key](model=model)


def list_providers() -> Dict[str, bool]:
    """List all providers and their availability.

    Returns:
        Dict mapping provider name to availability status
    """
    result = {}
    for name, provider_class in PROVIDERS.items():
        if name in ALIASES:
            continue
        try:
            result[name] = provider_class().is_available()
        except Exception:
            result[name] = False
    result["ollama"] = LiteLLMProvider(default_model=to_litellm_model("ollama", None)).is_available()
    return result
