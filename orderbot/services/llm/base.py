from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


class LLMError(Exception):
    """LLM provider returned an error or an unusable response."""


@dataclass
class LLMResponse:
    content: str
    model: str
    usage: Optional[dict] = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def generate(
        self,
        messages: List[dict],
        model: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 256,
        timeout_seconds: Optional[float] = None,
        json_output: bool = False,
    ) -> LLMResponse:
        """Generate response from LLM. json_output asks the provider for a bare JSON object."""
        pass
