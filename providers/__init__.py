"""LLM Provider abstraction: every provider is a reasoning source via generate()."""

from .base import LLMProvider, LLMResponse, UsageTotals
from .factory import get_provider, list_providers
from .litellm_provider import LiteLLMProvider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "UsageTotals",
    "LiteLLMProvider",
    "get_provider",
    "list_providers",
]
