"""Conversion of canonical requests into provider-native wire payloads.

Every function in this module is pure: no network access, no configuration
lookups beyond the :class:`ProviderAdapterSettings` handed in explicitly.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Iterable, Mapping

from .attachments import (
    PDF_MIME_TYPE,
    AttachmentStrategy,
    DocumentKind,
    build_data_url,
    classify,
    detect_kind,
    parse_data_url,
)
from .config import ProviderAdapterSettings
from .exceptions import AttachmentError, InvalidRequestError
from .types import (
    AIRequest,
    Attachment,
    ContentBlock,
    ImageBlock,
    ProviderName,
    TextBlock,
    WireRequest,
)

logger = logging.getLogger(__name__)

JSON_MIME_TYPE = "application/json"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4096


def decompose_content(content: Any) -> list[ContentBlock]:
    """Flatten message content into ordered text and image blocks.

    ``image_url`` entries are decoded from strict base64 data URLs; entries
    that do not match that shape are dropped.
    """

    if content is None:
        return []
    if isinstance(content, str):
        return [TextBlock(content)]
    if isinstance(content, (TextBlock, ImageBlock)):
        return [content]
    if isinstance(content, (list, tuple)):
        blocks: list[ContentBlock] = []
        for item in content:
            blocks.extend(_decompose_item(item))
        return blocks
    return [TextBlock(stringify_content(content))]


def _decompose_item(item: Any) -> list[ContentBlock]:
    if isinstance(item, Mapping):
        item_type = item.get("type")
        if item_type == "text":
            text = item.get("text")
            return [TextBlock(text)] if isinstance(text, str) else []
        if item_type == "image_url":
            image_url = item.get("image_url")
            url = image_url.get("url") if isinstance(image_url, Mapping) else image_url
            block = parse_data_url(url)
            return [block] if block is not None else []
        nested = item.get("content")
        if isinstance(nested, (list, tuple)):
            return decompose_content(nested)
        return []
    if isinstance(item, (str, TextBlock, ImageBlock, list, tuple)):
        return decompose_content(item)
    return []


def stringify_content(content: Any) -> str:
    """Render non-text message content as JSON; ``None`` becomes an empty string."""

    if content is None:
        return ""
    return json.dumps(content, ensure_ascii=False, default=str)


def wire_mime_type(attachment: Attachment) -> str:
    """MIME type sent to the provider; files recognised as PDF travel as ``application/pdf``."""

    if detect_kind(attachment.mime_type, attachment.file_name) is DocumentKind.PDF:
        return PDF_MIME_TYPE
    return attachment.mime_type


def wants_json(request: AIRequest) -> bool:
    mime_type = (request.response_mime_type or "").strip().lower()
    return request.response_schema is not None or mime_type == JSON_MIME_TYPE


class RequestNormalizer(ABC):
    """Builds the wire payload for one provider family."""

    provider: ClassVar[ProviderName]
    default_model: ClassVar[str]

    def __init__(self, config: ProviderAdapterSettings | None = None) -> None:
        self._config = config or ProviderAdapterSettings()

    def resolve_model(self, request: AIRequest) -> str:
        return request.model or self._config.model or self.default_model

    def normalize(self, request: AIRequest) -> WireRequest:
        if not request.messages and not request.attachments:
            raise InvalidRequestError("AI requests require at least one message or attachment")
        media = self._media_attachments(request.attachments)
        payload = self._build_payload(request, media)
        return WireRequest(provider=self.provider, model=self.resolve_model(request), payload=payload)

    @staticmethod
    def _media_attachments(attachments: Iterable[Attachment]) -> list[Attachment]:
        media: list[Attachment] = []
        for attachment in attachments:
            strategy = classify(
                attachment.mime_type,
                attachment.file_name,
                prefer_upload=attachment.prefer_upload,
            )
            if strategy is AttachmentStrategy.EXTRACTED_TEXT:
                raise AttachmentError(
                    f"Attachment of type '{attachment.mime_type}' must be converted to text "
                    "before it can be sent to a provider"
                )
            media.append(attachment)
        return media

    @abstractmethod
    def _build_payload(self, request: AIRequest, media: list[Attachment]) -> dict[str, Any]:
        """Serialise the request payload for the provider."""


class GeminiNormalizer(RequestNormalizer):
    """``generateContent`` payloads: one turn, attachments ahead of text."""

    provider = ProviderName.GEMINI
    default_model = "gemini-2.5-flash"

    def _build_payload(self, request: AIRequest, media: list[Attachment]) -> dict[str, Any]:
        parts: list[dict[str, Any]] = [
            {"inlineData": {"data": attachment.base64_data, "mimeType": wire_mime_type(attachment)}}
            for attachment in media
        ]
        for message in request.messages:
            parts.extend(self._part(block) for block in decompose_content(message.content))

        payload: dict[str, Any] = {"contents": [{"parts": parts}]}
        if request.system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": request.system_instruction}]}

        generation_config = self._generation_config(request)
        if generation_config:
            payload["generationConfig"] = generation_config
        return payload

    @staticmethod
    def _part(block: ContentBlock) -> dict[str, Any]:
        if isinstance(block, ImageBlock):
            return {"inlineData": {"data": block.data, "mimeType": block.mime_type}}
        return {"text": block.text}

    def _generation_config(self, request: AIRequest) -> dict[str, Any]:
        temperature = request.temperature if request.temperature is not None else self._config.temperature
        max_tokens = (
            request.max_output_tokens
            if request.max_output_tokens is not None
            else self._config.max_output_tokens
        )
        response_mime_type = request.response_mime_type
        if not response_mime_type and request.response_schema is not None:
            response_mime_type = JSON_MIME_TYPE

        generation_config: dict[str, Any] = {}
        if temperature is not None:
            generation_config["temperature"] = temperature
        if max_tokens is not None:
            generation_config["maxOutputTokens"] = max_tokens
        if response_mime_type:
            generation_config["responseMimeType"] = response_mime_type
        if request.response_schema is not None:
            generation_config["responseSchema"] = dict(request.response_schema)
        return generation_config


class ChatCompletionsNormalizer(RequestNormalizer):
    """OpenAI chat-completions payloads."""

    provider = ProviderName.OPENAI
    default_model = "gpt-4o"

    def _build_payload(self, request: AIRequest, media: list[Attachment]) -> dict[str, Any]:
        messages: list[dict[str, Any]] = []
        if request.system_instruction:
            messages.append({"role": "system", "content": request.system_instruction})
        for message in request.messages:
            messages.append({"role": message.role, "content": self._content(message.content)})

        blocks = [self._attachment_block(attachment) for attachment in media]
        if blocks:
            self._attach(messages, blocks, has_turns=bool(request.messages))

        payload: dict[str, Any] = {
            "model": self.resolve_model(request),
            "messages": messages,
            "temperature": self._temperature(request),
            "max_tokens": self._max_tokens(request),
        }
        if wants_json(request):
            payload["response_format"] = {"type": "json_object"}
        return payload

    def _attach(self, messages: list[dict[str, Any]], blocks: list[dict[str, Any]], *, has_turns: bool) -> None:
        if not has_turns:
            messages.append({"role": "user", "content": blocks})
            return

        last_message = messages[-1]
        if last_message["role"] != "user":
            logger.warning(
                "Attachments dropped: last message is not user-authored",
                extra={"provider": self.provider.value, "role": last_message["role"]},
            )
            return

        content = last_message["content"]
        combined: list[Any] = [{"type": "text", "text": content}] if isinstance(content, str) else list(content)
        combined.extend(blocks)
        last_message["content"] = combined

    @staticmethod
    def _content(content: Any) -> Any:
        if isinstance(content, str):
            return content
        if isinstance(content, (list, tuple)):
            return [ChatCompletionsNormalizer._block(item) for item in content]
        return stringify_content(content)

    @staticmethod
    def _block(item: Any) -> Any:
        if isinstance(item, TextBlock):
            return {"type": "text", "text": item.text}
        if isinstance(item, ImageBlock):
            return {"type": "image_url", "image_url": {"url": build_data_url(item.mime_type, item.data)}}
        return item

    @staticmethod
    def _attachment_block(attachment: Attachment) -> dict[str, Any]:
        if attachment.file_id:
            return {"type": "input_file", "input_file": {"file_id": attachment.file_id}}
        return {
            "type": "image_url",
            "image_url": {"url": build_data_url(wire_mime_type(attachment), attachment.base64_data)},
        }

    def _temperature(self, request: AIRequest) -> float:
        if request.temperature is not None:
            return request.temperature
        if self._config.temperature is not None:
            return self._config.temperature
        return DEFAULT_TEMPERATURE

    def _max_tokens(self, request: AIRequest) -> int:
        if request.max_output_tokens is not None:
            return request.max_output_tokens
        if self._config.max_output_tokens is not None:
            return self._config.max_output_tokens
        return DEFAULT_MAX_TOKENS


class DeepSeekNormalizer(ChatCompletionsNormalizer):
    """DeepSeek is wire-compatible with OpenAI chat completions."""

    provider = ProviderName.DEEPSEEK
    default_model = "deepseek-chat"


_NORMALIZERS: dict[ProviderName, type[RequestNormalizer]] = {
    ProviderName.GEMINI: GeminiNormalizer,
    ProviderName.OPENAI: ChatCompletionsNormalizer,
    ProviderName.DEEPSEEK: DeepSeekNormalizer,
}


def get_normalizer(
    provider: ProviderName | str,
    config: ProviderAdapterSettings | None = None,
) -> RequestNormalizer:
    return _NORMALIZERS[ProviderName.parse(provider)](config)


def normalize(request: AIRequest, config: ProviderAdapterSettings | None = None) -> WireRequest:
    """Build the provider wire request for *request* without any I/O."""

    return get_normalizer(request.provider, config).normalize(request)


__all__ = (
    "ChatCompletionsNormalizer",
    "DeepSeekNormalizer",
    "GeminiNormalizer",
    "RequestNormalizer",
    "decompose_content",
    "get_normalizer",
    "normalize",
    "stringify_content",
    "wants_json",
    "wire_mime_type",
)
