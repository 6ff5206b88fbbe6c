from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from llmproxy.core.ai.config import AIAdapterSettings, ProviderAdapterSettings
from llmproxy.core.settings import Settings, get_settings
from llmproxy.main import create_application

_KEY_VARIABLES = (
    "GEMINI_API_KEY",
    "OPENAI_API_KEY",
    "DEEPSEEK_API_KEY",
    "APP_GEMINI_API_KEY",
    "APP_OPENAI_API_KEY",
    "APP_DEEPSEEK_API_KEY",
    "APP_REQUIRED_PROVIDERS",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch) -> None:
    for variable in _KEY_VARIABLES:
        monkeypatch.delenv(variable, raising=False)
    get_settings.cache_clear()


def build_settings(
    *,
    gemini_key: str | None = "gemini-key",
    openai_key: str | None = "openai-key",
    deepseek_key: str | None = "deepseek-key",
    **overrides: Any,
) -> Settings:
    ai_settings = AIAdapterSettings(
        gemini=ProviderAdapterSettings(api_key=gemini_key, base_url="https://gemini.mock"),
        openai=ProviderAdapterSettings(api_key=openai_key, base_url="https://openai.mock/v1"),
        deepseek=ProviderAdapterSettings(api_key=deepseek_key, base_url="https://deepseek.mock/v1"),
    )
    overrides.setdefault("required_providers", [])
    return Settings(_env_file=None, ai=ai_settings, **overrides)


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)


@pytest.fixture()
def app_client_factory():
    clients: list[TestClient] = []

    def factory(settings: Settings, handler: Callable[[httpx.Request], httpx.Response]):
        transport = RecordingTransport(handler)
        application = create_application(settings=settings, transport=transport)
        test_client = TestClient(application)
        test_client.__enter__()
        clients.append(test_client)
        return test_client, transport

    yield factory

    for test_client in clients:
        test_client.__exit__(None, None, None)


@pytest.fixture()
def settings_factory():
    return build_settings
