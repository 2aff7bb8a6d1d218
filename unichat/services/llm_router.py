import logging
from typing import Optional

from unichat.config import Settings
from unichat.errors import ProviderError
from unichat.services.pricing import ModelFamily, classify_model
from unichat.services.providers.base import BaseLLMProvider
from unichat.services.providers.openai_provider import OpenAIProvider
from unichat.services.providers.anthropic_provider import AnthropicProvider
from unichat.services.providers.gemini_provider import GeminiProvider

logger = logging.getLogger(__name__)


def build_providers(settings: Settings) -> dict[ModelFamily, BaseLLMProvider]:
    """Build provider instances for each configured API key."""
    providers: dict[ModelFamily, BaseLLMProvider] = {}

    anthropic_key = settings.anthropic_api_key.get_secret_value()
    if anthropic_key:
        providers[ModelFamily.ANTHROPIC] = AnthropicProvider(anthropic_key)

    openai_key = settings.openai_api_key.get_secret_value()
    if openai_key:
        providers[ModelFamily.OPENAI] = OpenAIProvider(openai_key)

    google_key = settings.google_api_key.get_secret_value()
    if google_key:
        providers[ModelFamily.GOOGLE] = GeminiProvider(google_key)

    return providers


class LLMRouter:
    """Routes chat requests to the appropriate LLM provider based on model_id."""

    def __init__(
        self,
        settings: Settings,
        providers: Optional[dict[ModelFamily, BaseLLMProvider]] = None,
    ):
        self._providers = providers if providers is not None else build_providers(settings)

    def route(self, model_id: str) -> BaseLLMProvider:
        family = classify_model(model_id)
        provider = self._providers.get(family)
        if not provider:
            raise ProviderError(
                family.value,
                "provider not configured. Set the API key in .env for this provider.",
            )
        logger.info("Routing to %s for model %s", provider.get_provider_name(), model_id)
        return provider

    def get_provider_name(self, model_id: str) -> str:
        return classify_model(model_id).value
