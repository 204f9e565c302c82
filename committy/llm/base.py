"""Base classes and shared utilities for oracle providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TypedDict


class ChatMessage(TypedDict):
    """One conversational turn sent to the oracle."""

    role: str
    content: str


@dataclass
class RawLLMResult:
    """Result from an oracle call, including token usage."""

    raw_response: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


class BaseLLMProvider(ABC):
    """Abstract base class for oracle providers."""

    @abstractmethod
    def chat(
        self,
        messages: list[ChatMessage],
        model: str,
        temperature: float,
        json_mode: bool = False,
    ) -> RawLLMResult:
        """Send an ordered list of turns and return the reply text.

        Args:
            messages: Conversation turns, system prompt first.
            model: Model identifier.
            temperature: Sampling temperature.
            json_mode: Ask the oracle to return one strict JSON object.

        Returns:
            A RawLLMResult holding the stripped reply text.

        Raises:
            OracleRequestError: If the call fails or returns no content.
        """
        pass
