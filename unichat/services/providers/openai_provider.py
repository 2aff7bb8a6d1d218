import logging

import openai
from openai import AsyncOpenAI

from unichat.errors import ProviderError
from unichat.services.providers.base import BaseLLMProvider, ProviderResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseLLMProvider):
    def __init__(self, api_key: str):
        self._client = AsyncOpenAI(api_key=api_key)

    def get_provider_name(self) -> str:
        return "openai"

    async def chat(
        self,
        messages: list[dict],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> ProviderResponse:
        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIError as e:
            raise ProviderError(self.get_provider_name(), str(e)) from e

        text = ""
        if response.choices:
            msg = response.choices[0].message
            if msg and msg.content:
                text = msg.content

        # Missing usage is tolerated; the request is billed as zero tokens.
        input_tokens = 0
        output_tokens = 0
        if response.usage:
            input_tokens = response.usage.prompt_tokens or 0
            output_tokens = response.usage.completion_tokens or 0
        else:
            logger.warning("OpenAI returned no usage for model %s", model)

        return ProviderResponse(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
