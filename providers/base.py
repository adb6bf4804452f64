"""Base LLM provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from config import settings


@dataclass
class LLMResponse:
    """Standardized response from any LLM provider."""
    content: str
    input_tokens: int
    output_tokens: int
    model: str
    provider: str
    cost: float = 0.0


@dataclass
class UsageTotals:
    """Running token totals for one provider instance."""
    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    cost: float = 0.0

    def add(self, response: LLMResponse) -> None:
        self.calls += 1
        self.input_tokens += response.input_tokens or 0
        self.output_tokens += response.output_tokens or 0
        self.cost += response.cost or 0.0


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Subclasses implement `complete`. Discovery code only needs `generate`,
    which sends a single prompt with the configured model.
    """

    #: Model used by `generate`; None means the provider's default
    model: Optional[str] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (anthropic, openai, gemini, deepseek, litellm)."""
        pass

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Default model for this provider."""
        pass

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        """Generate a completion.

        Args:
            system_prompt: System/instruction prompt
            user_message: User message/query
            model: Model to use (defaults to provider's default)
            max_tokens: Maximum tokens in response

        Returns:
            LLMResponse with content and token counts
        """
        pass

    @property
    def usage(self) -> UsageTotals:
        if "_usage" not in self.__dict__:
            self._usage = UsageTotals()
        return self._usage

    def generate(self, prompt: str, system_prompt: str = "") -> str:
        """Send one prompt and return the response text."""
        response = self.complete(
            system_prompt=system_prompt,
            user_message=prompt,
            model=self.model,
            max_tokens=settings.max_tokens_per_call,
        )
        self.usage.add(response)
        return response.content or ""

    def is_available(self) -> bool:
        """Check if this provider is available (API key set, etc.)."""
        return True
