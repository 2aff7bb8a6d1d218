import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from unichat.config import get_settings
from unichat.database import set_db_path, init_db
from unichat.dependencies import get_llm_router
from unichat.main import register_error_handlers
from unichat.routers import health, chat, usage, models
from unichat.services.llm_router import LLMRouter
from unichat.services.pricing import ModelFamily

USER = {"X-User-Id": "user-1"}


def _create_test_app() -> FastAPI:
    """Create a minimal FastAPI app without the full lifespan."""
    app = FastAPI()
    app.include_router(health.router)
    app.include_router(chat.router)
    app.include_router(usage.router)
    app.include_router(models.router)
    register_error_handlers(app)
    return app


@pytest_asyncio.fixture
async def client(test_settings, fake_providers):
    """Each test gets a fresh database and in-memory providers."""
    set_db_path(test_settings.database_url)
    await init_db()

    app = _create_test_app()
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_llm_router] = lambda: LLMRouter(
        test_settings, providers=fake_providers
    )
    with TestClient(app) as c:
        yield c


def _chat_body(model_id="claude-x"):
    return {
        "modelId": model_id,
        "messages": [{"role": "user", "content": "Hi"}],
    }


class TestHealthEndpoint:
    def test_health_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestChatEndpoint:
    def test_chat_returns_normalized_result(self, client):
        response = client.post("/chat", json=_chat_body(), headers=USER)
        assert response.status_code == 200
        data = response.json()
        assert data["content"] == "hello"
        assert data["model_id"] == "claude-x"
        assert data["usage"] == {
            "input_tokens": 10,
            "output_tokens": 5,
            "total_tokens": 15,
        }

    def test_unauthenticated(self, client, fake_providers):
        response = client.post("/chat", json=_chat_body())
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "unauthenticated"
        assert all(p.calls == [] for p in fake_providers.values())

        usage_resp = client.get("/usage", headers=USER)
        assert usage_resp.json()["current"]["request_count"] == 0

    def test_unsupported_model(self, client):
        response = client.post("/chat", json=_chat_body("unknown-model"), headers=USER)
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "unsupported_model"
        assert "unknown-model" in error["message"]

    def test_empty_messages(self, client):
        response = client.post(
            "/chat", json={"modelId": "gpt-4", "messages": []}, headers=USER
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_argument"

    def test_malformed_payload(self, client):
        response = client.post(
            "/chat",
            json={"modelId": "gpt-4", "messages": [{"role": "system", "content": "x"}]},
            headers=USER,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_argument"

    def test_provider_error(self, client, fake_providers):
        from unichat.errors import ProviderError
        fake_providers[ModelFamily.OPENAI].error = ProviderError("openai", "503 upstream")

        response = client.post("/chat", json=_chat_body("gpt-4"), headers=USER)
        assert response.status_code == 502
        error = response.json()["error"]
        assert error["code"] == "provider_error"
        assert error["provider"] == "openai"

    def test_rate_limit(self, client, test_settings):
        test_settings.rate_limit_requests = 2
        for _ in range(2):
            assert client.post("/chat", json=_chat_body(), headers=USER).status_code == 200

        response = client.post("/chat", json=_chat_body(), headers=USER)
        assert response.status_code == 429
        assert response.json()["error"]["code"] == "rate_limit_exceeded"


class TestUsageEndpoint:
    def test_usage_empty(self, client):
        response = client.get("/usage", headers=USER)
        assert response.status_code == 200
        data = response.json()
        assert data["current"]["request_count"] == 0
        assert data["current"]["total_cost"] == 0.0
        assert data["history"] == []

    def test_usage_after_chat(self, client):
        client.post("/chat", json=_chat_body("claude-x"), headers=USER)
        client.post("/chat", json=_chat_body("gpt-4"), headers=USER)

        data = client.get("/usage", headers=USER).json()
        assert data["current"]["request_count"] == 2
        assert data["current"]["total_tokens"] == 30
        assert [h["model_id"] for h in data["history"]] == ["gpt-4", "claude-x"]

    def test_usage_requires_user(self, client):
        response = client.get("/usage")
        assert response.status_code == 401


class TestModelsEndpoint:
    def test_catalog(self, client, test_settings):
        response = client.get("/models", headers=USER)
        assert response.status_code == 200
        models_list = response.json()["models"]
        assert len(models_list) == len(test_settings.models_config)
        opus = next(m for m in models_list if m["id"] == "claude-3-opus-20240229")
        assert opus["provider"] == "Anthropic"
        assert opus["input_cost"] == 15.0
        assert opus["output_cost"] == 75.0
        assert opus["max_tokens"] == 200000

    def test_models_requires_user(self, client):
        response = client.get("/models")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "unauthenticated"
