"""AI provider adapters and orchestration exports."""

from __future__ import annotations


from .exceptions import (
    AIProviderError,
    AIServiceError,
    ErrorKind,
    NormalizedError,
    ProviderConfigurationError,
    normalize_error,
)
from .extractor import extract_text
from .normalizer import normalize
from .service import AIService
from .types import AIRequest, AIResponse, Attachment, PromptMessage, ProviderName, WireRequest

__all__ = (
    "AIProviderError",
    "AIRequest",
    "AIResponse",
    "AIService",
    "AIServiceError",
    "Attachment",
    "ErrorKind",
    "NormalizedError",
    "PromptMessage",
    "ProviderConfigurationError",
    "ProviderName",
    "WireRequest",
    "extract_text",
    "normalize",
    "normalize_error",
)
