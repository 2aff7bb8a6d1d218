import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio

from unichat.database import set_db_path, init_db
from unichat.services.pricing import ModelFamily
from unichat.services.providers.base import BaseLLMProvider, ProviderResponse


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class FakeProvider(BaseLLMProvider):
    """In-memory provider that records every call it receives."""

    def __init__(self, name: str, text: str = "hello",
                 input_tokens: int = 10, output_tokens: int = 5, error=None):
        self._name = name
        self.text = text
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens
        self.error = error
        self.calls: list[dict] = []

    def get_provider_name(self) -> str:
        return self._name

    async def chat(self, messages, model, temperature=0.7, max_tokens=1000):
        self.calls.append({
            "messages": messages,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error:
            raise self.error
        return ProviderResponse(
            text=self.text,
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
        )


@pytest.fixture
def temp_db_path():
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = f.name
    yield path
    Path(path).unlink(missing_ok=True)


@pytest.fixture
def test_settings(temp_db_path):
    from unichat.config import Settings
    return Settings(
        openai_api_key="sk-test-fake",
        anthropic_api_key="sk-ant-test-fake",
        google_api_key="fake-google-key",
        database_url=temp_db_path,
    )


@pytest_asyncio.fixture
async def initialized_db(temp_db_path):
    set_db_path(temp_db_path)
    await init_db()
    yield temp_db_path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_providers():
    return {
        ModelFamily.ANTHROPIC: FakeProvider("anthropic"),
        ModelFamily.OPENAI: FakeProvider("openai"),
        ModelFamily.GOOGLE: FakeProvider("google"),
    }
