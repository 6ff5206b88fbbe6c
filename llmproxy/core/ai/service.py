"""High level AI provider orchestration service."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Sequence

import httpx

from .attachments import AttachmentStrategy, DocumentKind, classify, detect_kind
from .exceptions import (
    AIServiceError,
    ErrorKind,
    NormalizedError,
    ProviderConfigurationError,
    UnsupportedAttachmentError,
    normalize_error,
)
from .extraction import extract_attachment_text, extract_pdf_text
from .providers import PROVIDER_CLIENTS, BaseAIClient
from .types import AIRequest, AIResponse, Attachment, PromptMessage, ProviderName

if TYPE_CHECKING:
    from ..settings import Settings

logger = logging.getLogger(__name__)

DOCUMENT_PREFIX = "Document content:\n"


class AIService:
    """Facade turning canonical requests into a uniform result or error."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(transport=transport)
        self._clients: dict[ProviderName, BaseAIClient] = {
            provider: client_class(getattr(settings.ai, provider.value), http_client=self._http)
            for provider, client_class in PROVIDER_CLIENTS.items()
        }

    async def __aenter__(self) -> "AIService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the shared HTTP client when this service created it."""

        if self._owns_http_client:
            await self._http.aclose()

    def available_providers(self) -> list[ProviderName]:
        return [provider for provider, client in self._clients.items() if client.is_configured]

    async def generate(self, request: AIRequest) -> AIResponse:
        """Generate a response for the supplied *request*.

        Raises an :class:`AIServiceError` subclass on failure; use
        :meth:`complete` for the never-raising variant.
        """

        start_time = time.perf_counter()
        provider_label = str(getattr(request.provider, "value", request.provider))
        model = request.model or ""
        client: BaseAIClient | None = None
        uploaded_file_ids: list[str] = []
        try:
            provider = ProviderName.parse(request.provider)
            provider_label = provider.value
            client = self._clients[provider]
            model = request.model or client.config.model or client.normalizer_class.default_model
            self._log_event("ai.request.start", provider_label, model)
            if not client.is_configured:
                raise ProviderConfigurationError(
                    f"API key missing for provider '{provider.value}'",
                    details={"provider": provider.value},
                )

            prepared = await self._prepare_request(request, client, uploaded_file_ids)
            wire = client.normalize(prepared)
            raw = await client.invoke(wire)
            text = client.extract(raw)
        except Exception as exc:
            kind = exc.kind if isinstance(exc, AIServiceError) else ErrorKind.INTERNAL
            self._log_event(
                "ai.request.failure",
                provider_label,
                model,
                duration=time.perf_counter() - start_time,
                error_kind=kind.value,
                error=str(exc),
            )
            raise
        finally:
            if client is not None:
                for file_id in uploaded_file_ids:
                    await client.delete(file_id)

        self._log_event(
            "ai.request.success",
            provider_label,
            wire.model,
            duration=time.perf_counter() - start_time,
        )
        return AIResponse(provider=provider, text=text, model=wire.model)

    async def complete(self, request: AIRequest) -> AIResponse | NormalizedError:
        """Return ``AIResponse`` or ``NormalizedError``; never raises."""

        try:
            return await self.generate(request)
        except Exception as exc:
            return normalize_error(exc)

    async def _prepare_request(
        self,
        request: AIRequest,
        client: BaseAIClient,
        uploaded_file_ids: list[str],
    ) -> AIRequest:
        """Resolve each attachment to inline data, an uploaded reference, or text."""

        media: list[Attachment] = []
        documents: list[str] = []
        for attachment in request.attachments:
            kind = detect_kind(attachment.mime_type, attachment.file_name)
            strategy = classify(
                attachment.mime_type,
                attachment.file_name,
                prefer_upload=attachment.prefer_upload,
            )

            if strategy is AttachmentStrategy.EXTRACTED_TEXT:
                documents.append(extract_attachment_text(attachment))
                continue
            if kind is DocumentKind.IMAGE and not client.supports_images:
                raise UnsupportedAttachmentError(
                    f"{client.label} does not support image analysis. "
                    "Use a vision-capable provider or send a text description instead.",
                    details={"provider": client.provider.value},
                )
            if kind is DocumentKind.PDF and not client.accepts_inline_pdf:
                documents.append(extract_pdf_text(attachment.data))
                continue

            if strategy is AttachmentStrategy.FILES_API_REFERENCE:
                if client.supports_file_upload:
                    file_id = await client.upload(
                        attachment.data,
                        attachment.file_name or "attachment",
                        attachment.mime_type,
                    )
                    uploaded_file_ids.append(file_id)
                    attachment = replace(attachment, file_id=file_id)
                else:
                    logger.info(
                        "%s has no file upload endpoint; sending attachment inline",
                        client.label,
                    )
                    attachment = replace(attachment, prefer_upload=False)
            media.append(attachment)

        messages = _fold_documents(request.messages, documents)
        return replace(request, attachments=tuple(media), messages=messages)

    @staticmethod
    def _log_event(
        action: str,
        provider: str,
        model: str,
        *,
        duration: float | None = None,
        error_kind: str | None = None,
        error: str | None = None,
    ) -> None:
        extra: dict[str, Any] = {
            "provider": provider,
            "model": model,
        }
        if duration is not None:
            extra["duration"] = duration
        if error_kind is not None:
            extra["error_kind"] = error_kind
        if error is not None:
            extra["error"] = error
        logger.info(action, extra=extra)


def _fold_documents(messages: Sequence[PromptMessage], documents: list[str]) -> tuple[PromptMessage, ...]:
    """Prefix extracted document text onto the last user turn."""

    folded = tuple(messages)
    if not documents:
        return folded

    document_text = "\n\n".join(f"{DOCUMENT_PREFIX}{text}" for text in documents)
    if folded and folded[-1].role == "user":
        last = folded[-1]
        if isinstance(last.content, str):
            content: Any = f"{document_text}\n\n{last.content}"
        else:
            content = [{"type": "text", "text": document_text}, *last.content]
        return (*folded[:-1], PromptMessage(role="user", content=content))
    return (*folded, PromptMessage(role="user", content=document_text))


__all__ = ("AIService",)
