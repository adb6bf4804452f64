"""OpenAI and OpenAI-compatible (Deepseek) providers."""

import os
from typing import Dict, Optional

from config import settings

from .base import LLMProvider, LLMResponse


class OpenAICompatibleProvider(LLMProvider):
    """Chat-completions provider; subclasses set the endpoint and models."""

    MODELS: Dict[str, str] = {}
    BASE_URL: Optional[str] = None
    API_KEY_ENV = "OPENAI_API_KEY"
    SETTINGS_KEY = "openai_api_key"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """Initialize the provider.

        Args:
            api_key: API key. Falls back to settings, then the provider's env var.
            model: Model or alias used by generate()
        """
        self.api_key = api_key or getattr(settings, self.SETTINGS_KEY, "") or os.environ.get(self.API_KEY_ENV)
        self.model = model
        self._client = None

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI
            kwargs = {"api_key": self.api_key, "timeout": settings.api_timeout_seconds}
            if self.BASE_URL:
                kwargs["base_url"] = self.BASE_URL
            self._client = OpenAI(**kwargs)
        return self._client

    def _resolve_model(self, model: Optional[str]) -> str:
        if model is None:
            return self.default_model
        return self.MODELS.get(model, model)

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        client = self._get_client()
        resolved_model = self._resolve_model(model)

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_message})

        response = client.chat.completions.create(
            model=resolved_model,
            max_tokens=max_tokens,
            messages=messages,
        )

        return LLMResponse(
            content=response.choices[0].message.content or "",
            input_tokens=response.usage.prompt_tokens,
            output_tokens=response.usage.completion_tokens,
            model=resolved_model,
            provider=self.name,
        )

    def is_available(self) -> bool:
        return bool(self.api_key)


class OpenAIProvider(OpenAICompatibleProvider):
    """Provider for OpenAI models."""

    MODELS = {
        "gpt-4o": "gpt-4o",
        "gpt-4o-mini": "gpt-4o-mini",
        "gpt-4-turbo": "gpt-4-turbo",
        "gpt-4": "gpt-4",
        "o1": "o1",
        "o1-mini": "o1-mini",
    }

    @property
    def name(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o"


class DeepseekProvider(OpenAICompatibleProvider):
    """Provider for Deepseek models (OpenAI-compatible API)."""

    MODELS = {
        "deepseek-chat": "deepseek-chat",
        "deepseek-coder": "deepseek-coder",
        "deepseek-reasoner": "deepseek-reasoner",
    }
    BASE_URL = "https://api.deepseek.com/v1"
    API_KEY_ENV = "DEEPSEEK_API_KEY"
    SETTINGS_KEY = "deepseek_api_key"

    @property
    def name(self) -> str:
        return "deepseek"

    @property
    def default_model(self) -> str:
        return "deepseek-chat"
