"""Google Gemini provider implementation."""

import os
from typing import Optional

from config import settings

from .base import LLMProvider, LLMResponse


class GeminiProvider(LLMProvider):
    """Provider for Google Gemini models."""

    MODELS = {
        "gemini-2.0-flash": "gemini-2.0-flash",
        "gemini-2.5-flash": "gemini-2.5-flash",
        "gemini-2.5-pro": "gemini-2.5-pro",
        "gemini-pro": "gemini-2.5-pro",
        "gemini-flash": "gemini-2.5-flash",
    }

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """Initialize Gemini provider.

        Args:
            api_key: Google API key. Falls back to settings, then GOOGLE_API_KEY or GEMINI_API_KEY.
            model: Model or alias used by generate()
        """
        self.api_key = (
            api_key
            or settings.google_api_key
            or os.environ.get("GOOGLE_API_KEY")
            or os.environ.get("GEMINI_API_KEY")
        )
        self.model = model
        self._configured = False

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return "gemini-2.5-flash"

    def _configure(self):
        if not self._configured and self.api_key:
            import google.generativeai as genai
            genai.configure(api_key=self.api_key)
            self._configured = True

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
        import google.generativeai as genai

        self._configure()
        resolved_model = self._resolve_model(model)

        gen_model = genai.GenerativeModel(
            model_name=resolved_model,
            system_instruction=system_prompt or None,
        )
        response = gen_model.generate_content(
            user_message,
            generation_config=genai.types.GenerationConfig(max_output_tokens=max_tokens),
        )

        # Token counts are not always reported; estimate from text length
        usage = getattr(response, "usage_metadata", None)
        input_tokens = getattr(usage, "prompt_token_count", None) or len(system_prompt + user_message) // 4
        output_tokens = getattr(usage, "candidates_token_count", None) or len(response.text) // 4

        return LLMResponse(
            content=response.text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=resolved_model,
            provider=self.name,
        )

    def is_available(self) -> bool:
        return bool(self.api_key)
