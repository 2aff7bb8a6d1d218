import logging

import httpx
from google import genai
from google.genai import errors, types

from unichat.errors import ProviderError
from unichat.services.providers.base import BaseLLMProvider, ProviderResponse

logger = logging.getLogger(__name__)


def estimate_tokens(text: str) -> int:
    """Approximate token count as one token per four characters, rounded up."""
    return -(-len(text) // 4)


class GeminiProvider(BaseLLMProvider):
    """Google Gemini via single-prompt generate_content.

    The conversation is flattened into one newline-joined prompt and token
    counts are estimated from character length, not read from the response.
    """

    def __init__(self, api_key: str):
        self._client = genai.Client(api_key=api_key)

    def get_provider_name(self) -> str:
        return "google"

    async def chat(
        self,
        messages: list[dict],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> ProviderResponse:
        prompt = "\n".join(m["content"] for m in messages)

        config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=config,
            )
        except (errors.APIError, httpx.HTTPError) as e:
            logger.error("Gemini request error: %s", e)
            raise ProviderError(self.get_provider_name(), str(e)) from e

        text = response.text or ""
        return ProviderResponse(
            text=text,
            input_tokens=estimate_tokens(prompt),
            output_tokens=estimate_tokens(text),
        )
