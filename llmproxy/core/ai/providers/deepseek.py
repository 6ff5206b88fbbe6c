"""DeepSeek provider adapter (OpenAI-compatible chat completions)."""

from __future__ import annotations

from ..normalizer import DeepSeekNormalizer
from ..types import ProviderName
from .openai import ChatCompletionsClient


class DeepSeekClient(ChatCompletionsClient):
    """Adapter for DeepSeek chat completions; text only, no Files API."""

    provider = ProviderName.DEEPSEEK
    label = "DeepSeek"
    default_base_url = "https://api.deepseek.com/v1"
    normalizer_class = DeepSeekNormalizer
    error_message_paths = (("error", "message"), ("message",))

    supports_images = False
    accepts_inline_pdf = False


__all__ = ("DeepSeekClient",)
