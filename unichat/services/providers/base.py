from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class ProviderResponse:
    """Normalized completion from any LLM provider."""
    text: str = ""
    input_tokens: int = 0
    output_tokens: int = 0


class BaseLLMProvider(ABC):
    @abstractmethod
    async def chat(
        self,
        messages: list[dict],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> ProviderResponse:
        """Return the whole completion for ``messages``.

        Raises ProviderError on any transport or API failure.
        """
        ...

    @abstractmethod
    def get_provider_name(self) -> str:
        ...
