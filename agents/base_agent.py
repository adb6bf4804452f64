"""Base agent class that all discovery agents inherit from.

Every agent:
- Builds a prompt from the session state it is given
- Sends it to the reasoning source with the agent's system prompt
- Parses the response leniently into contracts
- Turns reasoning failures into an empty result instead of an exception
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from providers import LLMProvider

logger = logging.getLogger(__name__)


class BaseAgent(ABC):
    """Base class for discovery agents.

    Args:
        reasoning: An LLMProvider, or any object with `generate(prompt) -> str`
        role: Short agent name used in log messages
    """

    SYSTEM_PROMPT = ""

    def __init__(self, reasoning, role: str):
        self.reasoning = reasoning
        self.role = role
        self.calls = 0
        self.failures = 0

    def _build_full_prompt(self, prompt: str) -> str:
        if not self.SYSTEM_PROMPT:
            return prompt
        return f"{self.SYSTEM_PROMPT.strip()}\n\n---\n\n{prompt}"

    def _ask(self, prompt: str) -> Optional[str]:
        """Call the reasoning source. Returns None if the call fails.

        Providers get the system prompt as a separate message; any other
        `generate(prompt)` object gets it prepended to the prompt.
        """
        self.calls += 1
        try:
            if isinstance(self.reasoning, LLMProvider):
                return self.reasoning.generate(prompt, system_prompt=self.SYSTEM_PROMPT.strip())
            return self.reasoning.generate(self._build_full_prompt(prompt))
        except Exception as e:
            self.failures += 1
            logger.warning("%s: reasoning call failed: %s", self.role, e)
            return None

    @abstractmethod
    def get_task_description(self) -> str:
        """Return a description of what this agent does.

        Used for logging and progress output.
        """
        pass
