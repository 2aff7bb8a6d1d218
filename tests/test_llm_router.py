import pytest

from unichat.config import Settings
from unichat.errors import ProviderError, UnsupportedModel
from unichat.services.llm_router import LLMRouter, build_providers
from unichat.services.pricing import ModelFamily
from unichat.services.providers.anthropic_provider import AnthropicProvider
from unichat.services.providers.gemini_provider import GeminiProvider
from unichat.services.providers.openai_provider import OpenAIProvider


class TestLLMRouter:
    def test_get_provider_name(self, test_settings):
        router = LLMRouter(test_settings)
        assert router.get_provider_name("claude-3-5-sonnet-20240620") == "anthropic"
        assert router.get_provider_name("claude-3-haiku-20240307") == "anthropic"
        assert router.get_provider_name("gpt-4") == "openai"
        assert router.get_provider_name("gpt-3.5-turbo") == "openai"
        assert router.get_provider_name("gemini-pro") == "google"

    def test_route_selects_family_adapter(self, test_settings, fake_providers):
        router = LLMRouter(test_settings, providers=fake_providers)
        assert router.route("claude-x") is fake_providers[ModelFamily.ANTHROPIC]
        assert router.route("gpt-x") is fake_providers[ModelFamily.OPENAI]
        assert router.route("gemini-x") is fake_providers[ModelFamily.GOOGLE]

    @pytest.mark.parametrize(
        "model_id", ["unknown-model", "llama-3", "Claude-3", "gpt4", "", "xclaude-3"]
    )
    def test_unknown_model_raises(self, test_settings, fake_providers, model_id):
        router = LLMRouter(test_settings, providers=fake_providers)
        with pytest.raises(UnsupportedModel):
            router.route(model_id)
        for provider in fake_providers.values():
            assert provider.calls == []

    def test_unconfigured_provider_raises(self, temp_db_path):
        settings = Settings(
            anthropic_api_key="sk-ant-test-fake",
            openai_api_key="",
            google_api_key="",
            database_url=temp_db_path,
        )
        router = LLMRouter(settings)
        with pytest.raises(ProviderError) as exc_info:
            router.route("gpt-4")
        assert exc_info.value.provider == "openai"


class TestBuildProviders:
    def test_builds_one_adapter_per_configured_key(self, test_settings):
        providers = build_providers(test_settings)
        assert isinstance(providers[ModelFamily.ANTHROPIC], AnthropicProvider)
        assert isinstance(providers[ModelFamily.OPENAI], OpenAIProvider)
        assert isinstance(providers[ModelFamily.GOOGLE], GeminiProvider)

    def test_skips_missing_keys(self, temp_db_path):
        settings = Settings(
            anthropic_api_key="",
            openai_api_key="sk-test-fake",
            google_api_key="",
            database_url=temp_db_path,
        )
        providers = build_providers(settings)
        assert list(providers) == [ModelFamily.OPENAI]
