from __future__ import annotations

import pytest

from llmproxy.core.ai.exceptions import ProviderConfigurationError
from llmproxy.core.ai.types import ProviderName
from llmproxy.core.settings import Settings


def test_provider_keys_are_read_from_plain_environment(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "g-secret")
    monkeypatch.setenv("APP_OPENAI_API_KEY", "o-secret")

    settings = Settings(_env_file=None)

    assert settings.ai.gemini.api_key == "g-secret"
    assert settings.ai.openai.api_key == "o-secret"
    assert settings.ai.deepseek.api_key is None
    assert settings.configured_providers() == [ProviderName.GEMINI, ProviderName.OPENAI]


def test_nested_adapter_settings_take_precedence(monkeypatch) -> None:
    monkeypatch.setenv("DEEPSEEK_API_KEY", "flat")
    monkeypatch.setenv("APP_AI__DEEPSEEK__API_KEY", "nested")
    monkeypatch.setenv("APP_AI__DEEPSEEK__MODEL", "deepseek-reasoner")

    settings = Settings(_env_file=None)

    assert settings.ai.deepseek.api_key == "nested"
    assert settings.ai.deepseek.model == "deepseek-reasoner"


def test_comma_separated_lists(monkeypatch) -> None:
    monkeypatch.setenv("APP_ALLOWED_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("APP_REQUIRED_PROVIDERS", "openai,deepseek")

    settings = Settings(_env_file=None)

    assert settings.allowed_origins == ["https://a.example", "https://b.example"]
    assert settings.required_providers == [ProviderName.OPENAI, ProviderName.DEEPSEEK]


def test_required_secrets_are_enforced(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "o-secret")

    settings = Settings(_env_file=None, required_providers=["gemini", "openai"])

    with pytest.raises(ProviderConfigurationError) as exc_info:
        settings.ensure_required_secrets()
    assert str(exc_info.value) == "Missing required provider API keys: gemini"


def test_default_requires_gemini_only(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "g")

    settings = Settings(_env_file=None)

    assert settings.required_providers == [ProviderName.GEMINI]
    settings.ensure_required_secrets()
