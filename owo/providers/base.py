"""Abstract provider interface for command generation."""

from abc import ABC, abstractmethod

from owo.core.configs import ProviderConfig
from owo.core.prompt_builder import PromptContext


class Provider(ABC):
    """
    Abstract base class for LLM backends.

    Each backend (OpenAI, Claude, Gemini, etc.) implements this interface
    to turn a prompt into raw model text.
    """

    def __init__(self, config: ProviderConfig):
        self.config = config

    @abstractmethod
    def send(self, prompt: PromptContext) -> str:
        """
        Perform exactly one request/response exchange.

        Args:
            prompt: System prompt and user message for this call

        Returns:
            Raw model text ("" when the backend returned no content)

        Raises:
            Exception: The backend's error, carrying an HTTP-like status
                when one is available. No retries happen here.
        """
        pass
