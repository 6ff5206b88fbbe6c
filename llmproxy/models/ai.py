"""Request and response models for the AI generation endpoints."""

from __future__ import annotations

import binascii
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..core.ai.exceptions import AttachmentError
from ..core.ai.types import AIRequest, AIResponse, Attachment, PromptMessage, ProviderName


class MessagePayload(BaseModel):
    """Single conversation turn supplied by the caller."""

    role: Literal["system", "user", "assistant"] = Field(..., description="Author of the turn")
    content: str | list[Any] = Field(
        ..., description="Plain text or a list of structured content parts"
    )


class AttachmentPayload(BaseModel):
    """Base64 encoded file sent alongside the prompt."""

    model_config = ConfigDict(populate_by_name=True)

    data: str = Field(..., description="Base64 encoded file content")
    mime_type: str = Field(
        ...,
        validation_alias=AliasChoices("mimeType", "mime_type"),
        description="MIME type reported by the caller",
    )
    file_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("fileName", "file_name"),
        description="Original file name, used when the MIME type is ambiguous",
    )
    upload: bool = Field(
        default=False,
        description="Pre-upload the file to the provider's Files API when supported",
    )

    def to_attachment(self) -> Attachment:
        try:
            return Attachment.from_base64(
                self.data,
                self.mime_type,
                self.file_name,
                prefer_upload=self.upload,
            )
        except (binascii.Error, ValueError) as exc:
            raise AttachmentError(
                f"Attachment '{self.file_name or 'attachment'}' is not valid base64 data"
            ) from exc


class GenerateRequestPayload(BaseModel):
    """Body accepted by ``POST /ai/generate``."""

    model_config = ConfigDict(populate_by_name=True)

    provider: str = Field(..., description="Target provider: gemini, openai or deepseek")
    model: str | None = Field(default=None, description="Provider model override")
    system_instruction: str | None = Field(
        default=None,
        validation_alias=AliasChoices("systemInstruction", "system_instruction"),
    )
    messages: list[MessagePayload] = Field(default_factory=list)
    attachments: list[AttachmentPayload] = Field(default_factory=list)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_output_tokens: int | None = Field(
        default=None,
        ge=1,
        validation_alias=AliasChoices("maxOutputTokens", "maxTokens", "max_output_tokens"),
    )
    response_schema: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("responseSchema", "response_schema"),
    )
    response_mime_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("responseMimeType", "response_mime_type"),
    )

    def to_request(self) -> AIRequest:
        """Convert the HTTP payload into the canonical service request."""

        return AIRequest(
            provider=ProviderName.parse(self.provider),
            model=self.model,
            system_instruction=self.system_instruction,
            messages=tuple(
                PromptMessage(role=message.role, content=message.content)
                for message in self.messages
            ),
            attachments=tuple(item.to_attachment() for item in self.attachments),
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            response_schema=self.response_schema,
            response_mime_type=self.response_mime_type,
        )


class GenerateResult(BaseModel):
    """Uniform text result returned for a successful generation."""

    text: str = Field(..., description="Flattened provider output; may be empty")
    provider: ProviderName = Field(..., description="Provider that served the request")
    model: str = Field(..., description="Model that produced the output")

    @classmethod
    def from_response(cls, response: AIResponse) -> "GenerateResult":
        return cls(text=response.text, provider=response.provider, model=response.model)


class ProvidersListing(BaseModel):
    """Providers known to the service and those ready for use."""

    supported: list[ProviderName] = Field(default_factory=list)
    configured: list[ProviderName] = Field(default_factory=list)
