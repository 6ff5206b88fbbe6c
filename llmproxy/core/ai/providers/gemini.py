"""Gemini provider adapter."""

from __future__ import annotations

from typing import Any, Mapping

from ..exceptions import EmptyResponseError
from ..extractor import extract_text
from ..normalizer import GeminiNormalizer
from ..types import ProviderName, WireRequest
from .base import BaseAIClient


class GeminiClient(BaseAIClient):
    """Adapter for Google Gemini generateContent API."""

    provider = ProviderName.GEMINI
    label = "Gemini"
    default_base_url = "https://generativelanguage.googleapis.com"
    normalizer_class = GeminiNormalizer

    def _endpoint(self, wire: WireRequest) -> str:
        return f"{self.base_url}/v1beta/models/{wire.model}:generateContent"

    def _params(self, api_key: str) -> dict[str, str]:
        return {"key": api_key}

    def extract(self, data: Mapping[str, Any]) -> str:
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise EmptyResponseError("Gemini response missing candidates", provider=self.provider.value)

        first_candidate = candidates[0]
        content = first_candidate.get("content") if isinstance(first_candidate, Mapping) else None
        parts = content.get("parts") if isinstance(content, Mapping) else None
        if not isinstance(parts, list):
            raise EmptyResponseError("Gemini candidate carried no content", provider=self.provider.value)
        return "".join(
            extract_text(part)
            for part in parts
            if isinstance(part, Mapping) and isinstance(part.get("text"), str)
        )


__all__ = ("GeminiClient",)
