import anthropic
from anthropic import AsyncAnthropic

from unichat.errors import ProviderError
from unichat.services.providers.base import BaseLLMProvider, ProviderResponse


class AnthropicProvider(BaseLLMProvider):
    def __init__(self, api_key: str):
        self._client = AsyncAnthropic(api_key=api_key)

    def get_provider_name(self) -> str:
        return "anthropic"

    async def chat(
        self,
        messages: list[dict],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> ProviderResponse:
        chat_messages = [
            {"role": m["role"], "content": m["content"]} for m in messages
        ]
        try:
            result = await self._client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=chat_messages,
            )
        except anthropic.APIError as e:
            raise ProviderError(self.get_provider_name(), str(e)) from e

        text = "".join(
            block.text for block in result.content
            if getattr(block, "type", None) == "text"
        )
        return ProviderResponse(
            text=text,
            input_tokens=result.usage.input_tokens,
            output_tokens=result.usage.output_tokens,
        )
