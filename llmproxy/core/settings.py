"""Application settings and configuration management."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .ai.config import AIAdapterSettings
from .ai.exceptions import ProviderConfigurationError
from .ai.types import ProviderName


class Settings(BaseSettings):
    """Runtime configuration derived from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=(".env",),
        env_nested_delimiter="__",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="LLM Proxy")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")

    allowed_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="List of origins permitted by CORS configuration.",
    )

    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("APP_GEMINI_API_KEY", "GEMINI_API_KEY"),
        description="Credential used to authenticate with the Gemini API.",
    )
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("APP_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="Credential used to authenticate with the OpenAI API.",
    )
    deepseek_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("APP_DEEPSEEK_API_KEY", "DEEPSEEK_API_KEY"),
        description="Credential used to authenticate with the DeepSeek API.",
    )

    ai: AIAdapterSettings = Field(
        default_factory=AIAdapterSettings,
        description="Per-provider adapter configuration.",
    )
    required_providers: Annotated[list[ProviderName], NoDecode] = Field(
        default_factory=lambda: [ProviderName.GEMINI],
        description="Providers whose API key must be present for the service to start.",
    )

    @field_validator("allowed_origins", "required_providers", mode="before")
    @classmethod
    def _split_comma_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @model_validator(mode="after")
    def _apply_provider_keys(self) -> "Settings":
        for provider, api_key in (
            (ProviderName.GEMINI, self.gemini_api_key),
            (ProviderName.OPENAI, self.openai_api_key),
            (ProviderName.DEEPSEEK, self.deepseek_api_key),
        ):
            adapter = getattr(self.ai, provider.value)
            if api_key and not adapter.api_key:
                adapter.api_key = api_key
        return self

    def configured_providers(self) -> list[ProviderName]:
        return [provider for provider in ProviderName if getattr(self.ai, provider.value).api_key]

    def ensure_required_secrets(self) -> None:
        """Fail fast when a provider listed as required has no API key."""

        configured = set(self.configured_providers())
        missing = [provider.value for provider in self.required_providers if provider not in configured]
        if missing:
            raise ProviderConfigurationError(
                f"Missing required provider API keys: {', '.join(missing)}",
                details={"providers": missing},
            )


@lru_cache()
def get_settings() -> Settings:
    """Return a cached instance of application settings."""

    return Settings()


__all__ = ("Settings", "get_settings")
