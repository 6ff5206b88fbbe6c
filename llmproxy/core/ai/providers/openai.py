"""OpenAI provider adapter."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from ..attachments import is_image
from ..exceptions import (
    EmptyResponseError,
    ProviderTransportError,
    UnsupportedAttachmentError,
)
from ..extractor import extract_text
from ..normalizer import ChatCompletionsNormalizer
from ..types import ProviderName, WireRequest
from .base import BaseAIClient

logger = logging.getLogger(__name__)


class ChatCompletionsClient(BaseAIClient):
    """Shared behaviour for OpenAI-compatible chat completion endpoints."""

    def _endpoint(self, wire: WireRequest) -> str:
        return f"{self.base_url}/chat/completions"

    def _headers(self, api_key: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    def extract(self, data: Mapping[str, Any]) -> str:
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            logger.warning("%s response carried no choices", self.label)
            return ""
        first_choice = choices[0]
        message = first_choice.get("message") if isinstance(first_choice, Mapping) else None
        if not isinstance(message, Mapping):
            return ""
        return extract_text(message.get("content"))


class OpenAIClient(ChatCompletionsClient):
    """Adapter for OpenAI Chat Completions and Files APIs."""

    provider = ProviderName.OPENAI
    label = "OpenAI"
    default_base_url = "https://api.openai.com/v1"
    normalizer_class = ChatCompletionsNormalizer
    supports_file_upload = True

    async def upload(self, data: bytes, file_name: str, mime_type: str) -> str:
        """Upload an image to the Files API and return its file id.

        Only images are accepted: the ``vision`` purpose rejects PDFs and other
        documents, which travel inline or as extracted text instead.
        """

        if not is_image(mime_type):
            raise UnsupportedAttachmentError(
                f"{self.label} file upload only accepts images, got '{mime_type}'"
            )

        api_key = self._require_api_key()
        try:
            response = await self._http.post(
                f"{self.base_url}/files",
                headers={"Authorization": f"Bearer {api_key}"},
                data={"purpose": "vision"},
                files={"file": (file_name, data, mime_type)},
                timeout=self._config.request_timeout,
            )
        except httpx.RequestError as exc:
            raise ProviderTransportError(
                f"{self.label} file upload transport error: {type(exc).__name__}",
                provider=self.provider.value,
            ) from exc

        self._raise_for_status(response)

        try:
            file_id = response.json().get("id")
        except (ValueError, AttributeError) as exc:
            raise EmptyResponseError(
                f"{self.label} file upload returned invalid JSON", provider=self.provider.value
            ) from exc
        if not isinstance(file_id, str) or not file_id.strip():
            raise EmptyResponseError(
                f"{self.label} file upload returned no file id", provider=self.provider.value
            )
        return file_id

    async def delete(self, file_id: str) -> None:
        """Best-effort removal of an uploaded file; failures are only logged."""

        if not self._config.api_key:
            logger.warning("Skipping deletion of %s file %s: API key missing", self.label, file_id)
            return
        try:
            response = await self._http.delete(
                f"{self.base_url}/files/{file_id}",
                headers={"Authorization": f"Bearer {self._config.api_key}"},
                timeout=self._config.request_timeout,
            )
        except httpx.RequestError as exc:
            logger.warning("Failed to delete %s file %s: %s", self.label, file_id, type(exc).__name__)
            return
        if not response.is_success:
            logger.warning(
                "Failed to delete %s file %s: %s",
                self.label,
                file_id,
                self._error_message(response),
            )


__all__ = ("ChatCompletionsClient", "OpenAIClient")
