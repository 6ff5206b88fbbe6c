"""Configuration models for AI provider adapters."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderAdapterSettings(BaseModel):
    """Provider specific adapter configuration."""

    model_config = ConfigDict(validate_assignment=True)

    base_url: str | None = Field(default=None, description="Base URL for the provider API")
    api_key: str | None = Field(default=None, description="API key used for authentication")
    model: str | None = Field(default=None, description="Default model identifier to invoke")
    request_timeout: float = Field(60.0, gt=0, description="HTTP request timeout in seconds")
    temperature: float | None = Field(
        default=None,
        ge=0.0,
        le=2.0,
        description="Fallback sampling temperature when the caller omits one",
    )
    max_output_tokens: int | None = Field(
        default=None,
        ge=1,
        description="Fallback output token limit when the caller omits one",
    )

    @field_validator("api_key", "base_url", "model", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AIAdapterSettings(BaseModel):
    """Group of adapter settings for all supported providers."""

    gemini: ProviderAdapterSettings = Field(default_factory=ProviderAdapterSettings)
    openai: ProviderAdapterSettings = Field(default_factory=ProviderAdapterSettings)
    deepseek: ProviderAdapterSettings = Field(default_factory=ProviderAdapterSettings)


__all__ = (
    "AIAdapterSettings",
    "ProviderAdapterSettings",
)
