"""LiteLLM-backed provider: any LiteLLM model string, including local Ollama models."""

from typing import Optional

from config import settings

from .base import LLMProvider, LLMResponse


DEFAULT_MODELS = {
    "anthropic": "anthropic/claude-sonnet-4-20250514",
    "openai": "gpt-4o-mini",
    "gemini": "gemini/gemini-2.0-flash",
    "deepseek": "deepseek/deepseek-chat",
    "ollama": "ollama/llama3.1",
}

# Provider + alias -> LiteLLM model string
MODEL_ALIASES = {
    "anthropic": {
        "claude-sonnet": "anthropic/claude-sonnet-4-20250514",
        "claude-opus": "anthropic/claude-opus-4-20250514",
        "claude-haiku": "anthropic/claude-3-5-haiku-20241022",
    },
    "openai": {
        "gpt-4o": "gpt-4o",
        "gpt-4o-mini": "gpt-4o-mini",
        "o1": "o1",
        "o1-mini": "o1-mini",
    },
    "gemini": {
        "gemini-2.0-flash": "gemini/gemini-2.0-flash",
        "gemini-2.5-flash": "gemini/gemini-2.5-flash",
        "gemini-2.5-pro": "gemini/gemini-2.5-pro",
    },
    "deepseek": {
        "deepseek-chat": "deepseek/deepseek-chat",
        "deepseek-reasoner": "deepseek/deepseek-reasoner",
    },
    "ollama": {
        "llama3": "ollama/llama3.1",
        "llama3.1": "ollama/llama3.1",
        "mistral": "ollama/mistral",
        "qwen2.5": "ollama/qwen2.5",
    },
}

_PROVIDER_SYNONYMS = {"claude": "anthropic", "gpt": "openai", "google": "gemini"}


def to_litellm_model(provider_name: Optional[str], model: Optional[str]) -> str:
    """Map provider + model to a LiteLLM model string.

    Already-qualified strings ("ollama/mistral") pass through unchanged.
    """
    if model and "/" in model:
        return model
    key = _PROVIDER_SYNONYMS.get((provider_name or "").lower(), (provider_name or "").lower())
    if key in MODEL_ALIASES:
        if not model:
            return DEFAULT_MODELS[key]
        alias = MODEL_ALIASES[key].get(model.lower())
        if alias:
            return alias
        return model if key == "openai" else f"{key}/{model}"
    if model:
        for aliases in MODEL_ALIASES.values():
            if model.lower() in aliases:
                return aliases[model.lower()]
        return model
    return DEFAULT_MODELS["openai"]


class LiteLLMProvider(LLMProvider):
    """Single provider that delegates to litellm.completion()."""

    def __init__(self, default_model: str, api_base: Optional[str] = None, metadata: Optional[dict] = None):
        """Initialize with the LiteLLM model string to use by default.

        Args:
            default_model: LiteLLM model string (e.g. gpt-4o-mini, ollama/mistral).
            api_base: Endpoint override; Ollama models default to settings.ollama_api_base.
            metadata: Optional dict passed through to litellm.
        """
        self._default_model = default_model
        self._metadata = metadata or {}
        if api_base is None and default_model.startswith("ollama"):
            api_base = settings.ollama_api_base
        self.api_base = api_base

    @property
    def name(self) -> str:
        return "litellm"

    @property
    def default_model(self) -> str:
        return self._default_model

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        import litellm

        resolved_model = model or self._default_model
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_message})

        kwargs = {
            "model": resolved_model,
            "messages": messages,
            "max_tokens": max_tokens,
            "timeout": settings.api_timeout_seconds,
            "metadata": {**self._metadata},
        }
        if self.api_base:
            kwargs["api_base"] = self.api_base
        response = litellm.completion(**kwargs)

        content = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "prompt_tokens", 0) or 0
        output_tokens = getattr(usage, "completion_tokens", 0) or 0
        hidden = getattr(response, "_hidden_params", None) or {}
        cost = float(hidden.get("response_cost", 0) or 0)
        model_id = getattr(response, "model", None) or resolved_model

        return LLMResponse(
            content=content,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=model_id,
            provider=self.name,
            cost=cost,
        )

    def is_available(self) -> bool:
        """LiteLLM reads API keys from env; we consider it available if the model is set."""
        return bool(self._default_model)
