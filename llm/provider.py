"""
LLMProvider interface. Every analysis backend implements this.

Implementations live in separate modules. No provider-specific
logic exists outside of llm/*.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from llm.prompts import ANALYSIS_SYSTEM, build_analysis_prompt


@dataclass
class LLMResponse:
    """What comes back from any LLM call."""
    text: str
    input_tokens: int
    output_tokens: int
    model: str


class LLMProvider(ABC):
    """
    Single interface for all analysis backends.

    Design notes:
    - `complete` is the only thing a backend has to implement.
    - System prompt + user prompt. Backends without a system role
      get both concatenated.
    - Calls are bounded by a timeout and a small token budget;
      summaries are 2-3 sentences.
    """

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 300,
    ) -> LLMResponse:
        """
        Send a prompt to the backend and get a response.

        Raises:
            LLMError: On any provider-specific failure.
        """
        ...

    @abstractmethod
    def name(self) -> str:
        """Return provider name for logging."""
        ...

    def attempt_analysis(self, content: str, competitor_name: str) -> str:
        """
        Ask this backend for a Summary/Category/Impact/Action analysis.

        Returns the response text verbatim. The format is requested, not
        enforced.

        Raises:
            LLMError: call failed or came back empty.
        """
        response = self.complete(
            system_prompt=ANALYSIS_SYSTEM,
            user_prompt=build_analysis_prompt(content, competitor_name),
        )
        text = (response.text or "").strip()
        if not text:
            raise LLMError(f"{self.name()} returned an empty response")
        return text


class LLMError(Exception):
    """Raised when an LLM call fails."""
    pass
