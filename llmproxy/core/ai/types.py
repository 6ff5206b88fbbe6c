"""Common types for AI provider adapters."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Mapping, Sequence, Union

from .exceptions import UnsupportedProviderError


class ProviderName(str, Enum):
    """Supported AI provider identifiers."""

    GEMINI = "gemini"
    OPENAI = "openai"
    DEEPSEEK = "deepseek"

    @classmethod
    def parse(cls, value: "ProviderName | str | None") -> "ProviderName":
        """Resolve *value* to a provider, rejecting anything outside the closed set."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnsupportedProviderError(value)


MessageRole = Literal["system", "user", "assistant"]

MessageContent = Union[str, Sequence[Any]]


@dataclass(slots=True)
class PromptMessage:
    """A single message turn; content is plain text or structured blocks."""

    role: MessageRole
    content: MessageContent


@dataclass(frozen=True, slots=True)
class TextBlock:
    """Text unit of a multimodal message turn."""

    text: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True, slots=True)
class ImageBlock:
    """Base64 image (or document) reference decoded from a data URL."""

    data: str
    mime_type: str
    kind: Literal["imageRef"] = "imageRef"


ContentBlock = Union[TextBlock, ImageBlock]


@dataclass(slots=True)
class Attachment:
    """Binary file travelling alongside a single request."""

    data: bytes
    mime_type: str
    file_name: str | None = None
    prefer_upload: bool = False
    file_id: str | None = None

    @classmethod
    def from_base64(
        cls,
        data: str,
        mime_type: str,
        file_name: str | None = None,
        *,
        prefer_upload: bool = False,
    ) -> "Attachment":
        return cls(
            data=base64.b64decode(data, validate=True),
            mime_type=mime_type,
            file_name=file_name,
            prefer_upload=prefer_upload,
        )

    @property
    def base64_data(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


@dataclass(slots=True)
class AIRequest:
    """Canonical, provider-agnostic request accepted by the AI service."""

    provider: ProviderName
    messages: Sequence[PromptMessage] = field(default_factory=tuple)
    model: str | None = None
    system_instruction: str | None = None
    attachments: Sequence[Attachment] = field(default_factory=tuple)
    temperature: float | None = None
    max_output_tokens: int | None = None
    response_schema: Mapping[str, Any] | None = None
    response_mime_type: str | None = None


@dataclass(slots=True)
class WireRequest:
    """Provider-specific payload ready to be sent over HTTP."""

    provider: ProviderName
    model: str
    payload: dict[str, Any]


@dataclass(slots=True)
class AIResponse:
    """Uniform successful result returned by the AI service."""

    provider: ProviderName
    text: str
    model: str


__all__ = (
    "AIRequest",
    "AIResponse",
    "Attachment",
    "ContentBlock",
    "ImageBlock",
    "MessageContent",
    "MessageRole",
    "PromptMessage",
    "ProviderName",
    "TextBlock",
    "WireRequest",
)
