"""Provider specific AI adapter implementations."""

from ..types import ProviderName
from .base import BaseAIClient
from .deepseek import DeepSeekClient
from .gemini import GeminiClient
from .openai import ChatCompletionsClient, OpenAIClient

PROVIDER_CLIENTS: dict[ProviderName, type[BaseAIClient]] = {
    ProviderName.GEMINI: GeminiClient,
    ProviderName.OPENAI: OpenAIClient,
    ProviderName.DEEPSEEK: DeepSeekClient,
}

__all__ = (
    "BaseAIClient",
    "ChatCompletionsClient",
    "DeepSeekClient",
    "GeminiClient",
    "OpenAIClient",
    "PROVIDER_CLIENTS",
)
